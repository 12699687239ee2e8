"""Hive blog feed API: a user's posts and reblogs served from Hive RPC nodes through a Redis cache."""

__version__ = "0.1.0"
