"""Application services (use cases) for browsing private servers."""
