"""
Pydantic schemas for property media files.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class MediaFile(BaseModel):
    """Uploaded media file attached to a property."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    file_name: str
    file_url: str
    file_type: str
    file_size: int = Field(0, ge=0)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_image(self) -> bool:
        return self.file_type.startswith("image/")

    @property
    def is_video(self) -> bool:
        return self.file_type.startswith("video/")
