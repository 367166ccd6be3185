"""
Audio module - fetching stored recordings.
"""

from .fetcher import AudioFetcher

__all__ = ["AudioFetcher"]
