"""
Upload module for bulk test-case imports.

Each attempt runs under a TimeoutGuard; the UploadOrchestrator retries
failed attempts a bounded number of times.
"""
from .orchestrator import UploadOrchestrator
from .guard import TimeoutGuard
from .models import UploadOptions, UploadProgress, UploadAttempt
from .protocols import UploadTransport
from .services import FileValidator, AsyncFileReader

__all__ = [
    'UploadOrchestrator',
    'TimeoutGuard',
    'UploadOptions',
    'UploadProgress',
    'UploadAttempt',
    'UploadTransport',
    'FileValidator',
    'AsyncFileReader',
]
