"""
Media intake: fetching attachments for generation.
"""

from .fetcher import MediaFetcher

__all__ = ["MediaFetcher"]
