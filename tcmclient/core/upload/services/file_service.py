"""
File validation and reading services for bulk uploads.
"""
import mimetypes
from pathlib import Path
from typing import Tuple, Optional, Union
import logging
import aiofiles

from ...api.request import FilePart

UploadSource = Union[str, Path, bytes, bytearray, FilePart]


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        return path, path.stat().st_size

    def validate_size(self, file_size: int) -> None:
        """
        Validate file size.

        Raises:
            ValueError: If file is empty
        """
        if file_size == 0:
            raise ValueError("Cannot upload empty file")


class AsyncFileReader:
    """
    Loads an upload source into a FilePart.

    Paths are read with aiofiles, so large import files do not block the
    event loop. Raw bytes and ready FileParts pass straight through.
    """

    DEFAULT_FILENAME = 'test-cases'

    def __init__(self, validator: Optional[FileValidator] = None):
        self._validator = validator or FileValidator()
        self._logger = logging.getLogger('tcmclient.upload.file')

    async def load(self, source: UploadSource, filename: Optional[str] = None) -> FilePart:
        """
        Build the file field of an upload.

        Args:
            source: Path, raw bytes or FilePart
            filename: Overrides the name sent to the backend

        Returns:
            FilePart ready for a multipart request

        Raises:
            FileNotFoundError: If a path does not exist
            ValueError: If the content is empty or the path is not a file
            TypeError: If the source type is not supported
        """
        if isinstance(source, FilePart):
            part = FilePart(filename or source.filename, source.content, source.content_type)
        elif isinstance(source, (bytes, bytearray)):
            part = FilePart(filename or self.DEFAULT_FILENAME, bytes(source))
        elif isinstance(source, (str, Path)):
            path, size = self._validator.validate(source)
            self._validator.validate_size(size)
            content = await self.read_file(path)
            content_type = mimetypes.guess_type(path.name)[0] or 'application/octet-stream'
            part = FilePart(filename or path.name, content, content_type)
        else:
            raise TypeError(f"Unsupported upload source: {type(source).__name__}")

        self._validator.validate_size(part.size)
        self._logger.debug(f"Loaded {part.filename} ({part.size} bytes)")
        return part

    async def read_file(self, file_path: Path) -> bytes:
        """Read an entire file."""
        async with aiofiles.open(file_path, 'rb') as f:
            return await f.read()
