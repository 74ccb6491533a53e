"""Exchange protocol adapters."""
