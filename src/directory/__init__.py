"""Safe Space Finder directory domain."""
