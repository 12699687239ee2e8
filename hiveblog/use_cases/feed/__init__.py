"""Feed use cases."""
