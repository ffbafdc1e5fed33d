"""File system event model, file ID cache and event debouncers."""

__version__ = "0.1.0"