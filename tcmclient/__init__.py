"""
tcmclient - Async Python client for the test-management backend.

Usage:
    >>> from tcmclient import TestCaseClient
    >>>
    >>> async with TestCaseClient("work") as tcm:
    ...     menus = await tcm.get_menus_by_level(1)
"""
import logging
from .client import TestCaseClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RequestDispatcher,
    RequestSpec,
    HTTPMethod,
    FilePart,
    HeaderBuilder,
)

# Errors
from .core.exceptions import (
    ErrorKind,
    TCMError,
    UnauthorizedError,
    HTTPStatusError,
    RequestTimeoutError,
    AbortedError,
    NetworkError,
)

# Credential stores
from .core.session import (
    CredentialStore,
    Credentials,
    SQLiteSession,
    MemorySession,
)

# Uploads
from .core.upload import (
    UploadOrchestrator,
    UploadOptions,
    UploadProgress,
    TimeoutGuard,
)

__version__ = '0.1.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for tcmclient modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'tcmclient',
        'tcmclient.api',
        'tcmclient.client',
        'tcmclient.upload',
        'tcmclient.upload.file',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'TestCaseClient',
    'RequestDispatcher',
    'RequestSpec',
    'HTTPMethod',
    'FilePart',
    'HeaderBuilder',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'ErrorKind',
    'TCMError',
    'UnauthorizedError',
    'HTTPStatusError',
    'RequestTimeoutError',
    'AbortedError',
    'NetworkError',
    'CredentialStore',
    'Credentials',
    'SQLiteSession',
    'MemorySession',
    'UploadOrchestrator',
    'UploadOptions',
    'UploadProgress',
    'TimeoutGuard',
    'setup_logging',
]
