"""
Credential store module.

Holds the bearer token used to authenticate API requests.
"""
from .protocols import CredentialStore
from .models import Credentials
from .sqlite_session import SQLiteSession
from .memory_session import MemorySession

__all__ = [
    'CredentialStore',
    'Credentials',
    'SQLiteSession',
    'MemorySession',
]
