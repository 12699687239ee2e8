"""Hive RPC adapters."""
