"""Cache store adapters."""
