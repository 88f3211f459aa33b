"""
Domain Model Module Initialization
"""

from atproto_storage.domain.entry import StorageEntry

__all__ = [
    "StorageEntry",
]
