"""Chain-state use cases."""
