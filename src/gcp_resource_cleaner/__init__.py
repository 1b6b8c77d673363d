"""Bottom-up cleanup of Google Cloud folder trees."""

__version__ = "0.1.0"
__git_commit__ = "unknown"
