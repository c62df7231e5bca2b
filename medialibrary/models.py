"""Media record model."""

from __future__ import annotations

from pathlib import PurePath
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field


class MediaRecord(BaseModel):
    """A managed media item attached to an owning entity.

    Attributes:
        id: Identifier assigned by the owner when the record is persisted
        name: Human readable name of the media
        file_name: Sanitized file name the bytes are stored under
        disk: Disk holding the original file
        conversions_disk: Disk holding derived files (conversions, responsive images)
        collection_name: Name of the collection the media belongs to
        mime_type: Mime type of the original file
        size: Size of the original file in bytes
        custom_properties: Arbitrary caller supplied properties
        manipulations: Image manipulations to apply when converting
        responsive_images: Generated responsive image data, empty until generated
        custom_headers: Headers to store alongside the file on remote disks
        order_column: Position within the owner's media, assigned on persistence
    """

    model_config = ConfigDict(validate_assignment=True, extra="allow")

    identity_fields: ClassVar[frozenset[str]] = frozenset({"id"})

    id: Optional[Any] = None
    name: str = ""
    file_name: str = ""
    disk: str = ""
    conversions_disk: str = ""
    collection_name: str = "default"
    mime_type: str = ""
    size: int = Field(default=0, ge=0)
    custom_properties: dict[str, Any] = Field(default_factory=dict)
    manipulations: dict[str, Any] = Field(default_factory=dict)
    responsive_images: dict[str, Any] = Field(default_factory=dict)
    custom_headers: dict[str, str] = Field(default_factory=dict)
    order_column: Optional[int] = None

    @property
    def extension(self) -> str:
        """Lowercase file extension without the leading dot."""
        return PurePath(self.file_name).suffix.lstrip(".").lower()

    def fill(self, attributes: dict[str, Any]) -> MediaRecord:
        """Merge caller supplied attributes onto the record.

        Identity fields are never overwritten.
        """
        for key, value in attributes.items():
            if key in self.identity_fields:
                continue
            setattr(self, key, value)
        return self

    def set_custom_headers(self, headers: dict[str, str]) -> MediaRecord:
        self.custom_headers = dict(headers)
        return self

    def get_custom_headers(self) -> dict[str, str]:
        return dict(self.custom_headers)

    def get_path(self) -> str:
        """Path of the original file relative to its disk root."""
        return f"{self.id}/{self.file_name}"
