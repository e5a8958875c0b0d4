"""argguard — declarative argument validation for service operations."""

__version__ = "0.1.0"
