"""Upload validation and naming for resource photos."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath

IMAGE_MIME_PREFIX = "image/"


class UploadRejection(str, Enum):
    MISSING_FILE = "MISSING_FILE"
    NOT_AN_IMAGE = "NOT_AN_IMAGE"
    TOO_LARGE = "TOO_LARGE"

    def message(self, max_size_bytes: int) -> str:
        if self is UploadRejection.MISSING_FILE:
            return "Please upload a file"
        if self is UploadRejection.NOT_AN_IMAGE:
            return "Please upload an image file"
        return f"Please upload an image size less than {max_size_bytes}"


@dataclass(frozen=True, slots=True)
class UploadedAsset:
    original_name: str
    mime_type: str
    size_bytes: int


@dataclass(frozen=True, slots=True)
class AssignedName:
    value: str

    def __str__(self) -> str:
        return self.value


def assigned_photo_name(resource_id: str, original_name: str) -> AssignedName:
    # One name per resource, so a new upload replaces the previous photo.
    return AssignedName(f"photo_{resource_id}{PurePath(original_name).suffix}")


def validate_upload(
    asset: UploadedAsset | None,
    max_size_bytes: int,
    *,
    resource_id: str,
) -> AssignedName | UploadRejection:
    """Check presence, image MIME type and size; name the file on success."""
    if asset is None:
        return UploadRejection.MISSING_FILE
    if not asset.mime_type.lower().startswith(IMAGE_MIME_PREFIX):
        return UploadRejection.NOT_AN_IMAGE
    if asset.size_bytes > max_size_bytes:
        return UploadRejection.TOO_LARGE
    return assigned_photo_name(resource_id, asset.original_name)


__all__ = ["AssignedName", "UploadRejection", "UploadedAsset", "assigned_photo_name", "validate_upload"]
