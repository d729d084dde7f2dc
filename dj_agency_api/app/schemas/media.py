"""
Pydantic models for media items (press kits, logos, performance photos).
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


FileType = Literal["image", "video", "audio"]
MediaCategory = Literal["presskit", "logo", "backdrop", "performance", "other"]


class MediaBase(BaseModel):
    dj_id: Optional[int] = None
    event_id: Optional[int] = None
    file_url: str = Field(..., min_length=1, examples=["https://cdn.example.com/alok/presskit.pdf"])
    file_type: FileType = "image"
    category: MediaCategory = "other"
    title: Optional[str] = None
    description: Optional[str] = None
    file_size: Optional[str] = Field(None, examples=["2.4 MB"])


class MediaCreate(MediaBase):
    """A media item must belong to a DJ, an event or both."""

    @model_validator(mode="after")
    def _require_owner(self) -> "MediaCreate":
        if self.dj_id is None and self.event_id is None:
            raise ValueError("media must reference a dj_id or an event_id")
        return self


class MediaUpdate(BaseModel):
    file_url: Optional[str] = Field(None, min_length=1)
    file_type: Optional[FileType] = None
    category: Optional[MediaCategory] = None
    title: Optional[str] = None
    description: Optional[str] = None
    file_size: Optional[str] = None


class MediaRead(MediaBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }
