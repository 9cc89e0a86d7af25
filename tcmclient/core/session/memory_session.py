"""
In-memory credential store.

Non-persistent storage for tests and short-lived scripts.
"""
from typing import Optional, Dict, Any

from .protocols import CredentialStore
from .models import Credentials


class MemorySession(CredentialStore):
    """
    In-memory credential store.

    Credentials are lost when the object is destroyed.

    Example:
        >>> session = MemorySession()
        >>> session.set("token-123")
        >>> session.get()
        'token-123'
    """

    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None):
        """
        Initialize memory store.

        Args:
            token: Optional initial token
            user: Optional initial user record
        """
        self._data: Optional[Credentials] = None
        if token:
            self.set(token, user)

    def get(self) -> Optional[str]:
        return self._data.token if self._data else None

    def set(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        data = Credentials(token=token, user=user)
        if not data.is_valid():
            raise ValueError("Token must be a non-empty string")
        self._data = data

    def clear(self) -> None:
        self._data = None

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self._data.user if self._data else None

    def load(self) -> Optional[Credentials]:
        """Get the full credential record."""
        return self._data

    def exists(self) -> bool:
        return self._data is not None

    def close(self) -> None:
        """Close storage (no-op for memory storage)."""
        pass

    def __enter__(self) -> 'MemorySession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
