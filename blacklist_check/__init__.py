"""blacklist_check package."""
