"""
Storage Entry Domain Model
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class StorageEntry(BaseModel):
    """In-memory Entry"""

    value: Any = Field(None, description="Stored value")
    expires_at: Optional[int] = Field(
        None, description="Expiration time in epoch milliseconds (None = never)"
    )
