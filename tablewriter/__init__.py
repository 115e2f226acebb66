"""Create database tables from in-memory schemas and keep them in step."""

__version__ = "1.0.0"
