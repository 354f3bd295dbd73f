"""Private server finder: browse and join occupied private servers."""
