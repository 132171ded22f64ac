"""Core helpers: working directory, settings and logging."""
