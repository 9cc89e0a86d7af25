"""
Credential store protocol.

The dispatcher depends on this interface only, so the bearer token lives in
an explicit object handed to it at construction instead of global state.
"""
from typing import Protocol, Optional, Dict, Any, runtime_checkable


@runtime_checkable
class CredentialStore(Protocol):
    """
    Protocol for credential store implementations.

    Reads are point-in-time snapshots; a token changed between two
    requests is observed by the next request.
    """

    def get(self) -> Optional[str]:
        """
        Get the current bearer token.

        Returns:
            Token string, or None when unauthenticated
        """
        ...

    def set(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        """
        Store a bearer token (and the user record, if any).

        Args:
            token: Bearer token
            user: Optional user record
        """
        ...

    def clear(self) -> None:
        """Forget the stored token and user."""
        ...

    def get_user(self) -> Optional[Dict[str, Any]]:
        """Get the stored user record, if any."""
        ...

    def exists(self) -> bool:
        """Check if a token is stored."""
        ...

    def close(self) -> None:
        """Release storage resources."""
        ...
