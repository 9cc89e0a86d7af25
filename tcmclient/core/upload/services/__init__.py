"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader, UploadSource

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'UploadSource',
]
