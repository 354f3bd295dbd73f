"""Domain layer for the private server finder."""
