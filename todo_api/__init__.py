"""Todo API backend: users, tasks and bearer-token authentication."""

__version__ = "1.0.0"
