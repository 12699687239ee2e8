"""Pydantic schemas for the public HTTP API."""
