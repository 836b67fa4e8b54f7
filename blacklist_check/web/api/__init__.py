"""blacklist_check API package."""
