"""
Media client for property file uploads.
Shares the API client's transport, base URL and token.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from galactavista.api.client import APIClient, parse_model
from galactavista.schemas import MediaFile
from galactavista.utils.exceptions import ProtocolError
from galactavista.utils.file_utils import FileValidator, PathLike, format_file_size
from galactavista.utils.validators import ValidationUtils

logger = logging.getLogger(__name__)


class MediaClient:
    """Upload, list and delete media files attached to a property."""

    def __init__(self, api_client: APIClient, validator: Optional[FileValidator] = None):
        self.api = api_client
        self.validator = validator or FileValidator()

    async def validate_file(self, path: PathLike, content_type: Optional[str] = None):
        """
        Validate a local file before upload.

        Returns:
            Tuple of (mime_type, content)

        Raises:
            ValidationError: If the file is too large, of a disallowed type, or
                an image whose content does not match its type
        """
        return await self.validator.validate_file(path, content_type)

    async def upload_file(self, property_id: int, path: PathLike, content_type: Optional[str] = None) -> MediaFile:
        """
        Upload one file as the multipart ``file`` field.

        Raises:
            ValidationError: Before any request, if the file is rejected locally
        """
        ValidationUtils.validate_id(property_id, "property_id")
        mime_type, content = await self.validate_file(path, content_type)
        file_name = Path(path).name

        logger.info(f"Uploading {file_name} ({format_file_size(len(content))}) to property {property_id}")
        data = await self.api.request(
            f"/properties/{property_id}/upload",
            "POST",
            files={"file": (file_name, content, mime_type)},
        )
        return parse_model(MediaFile, data)

    async def upload_files(self, property_id: int, paths: Sequence[PathLike]) -> List[MediaFile]:
        """Upload several files concurrently; the first failure is raised."""
        return list(await asyncio.gather(*(self.upload_file(property_id, p) for p in paths)))

    async def get_property_media(self, property_id: int) -> List[MediaFile]:
        ValidationUtils.validate_id(property_id, "property_id")
        data = await self.api.request(f"/properties/{property_id}/media")
        if not isinstance(data, list):
            raise ProtocolError("Media list response is not a list", payload=data)
        return [parse_model(MediaFile, item) for item in data]

    async def delete_media_file(self, property_id: int, file_id: int) -> None:
        ValidationUtils.validate_id(property_id, "property_id")
        ValidationUtils.validate_id(file_id, "file_id")
        await self.api.request(f"/properties/{property_id}/media/{file_id}", "DELETE", expect_data=False)

    @staticmethod
    def format_file_size(size: int) -> str:
        return format_file_size(size)
