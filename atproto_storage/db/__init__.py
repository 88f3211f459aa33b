"""
Database Module Initialization
"""

from atproto_storage.db.session import create_engine

__all__ = [
    "create_engine",
]
