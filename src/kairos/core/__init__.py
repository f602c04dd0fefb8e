"""Core date value, plugin registry, cache and rule types."""
