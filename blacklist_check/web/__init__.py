"""Web layer for the blacklist check service."""
