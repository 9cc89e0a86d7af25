"""Header builder for API requests."""
from typing import Dict, Optional

from ...session import CredentialStore


class HeaderBuilder:
    """Builds request headers from the current credential state."""

    CONTENT_TYPE_JSON = 'application/json'

    def __init__(
        self,
        store: CredentialStore,
        user_agent: Optional[str] = None,
        extra_headers: Optional[Dict[str, str]] = None
    ):
        self.store = store
        self.user_agent = user_agent
        self.extra_headers = dict(extra_headers or {})

    def build(self, json: bool = True) -> Dict[str, str]:
        """
        Builds request headers.

        Args:
            json: Declare a JSON body. Disabled for multipart uploads so the
                  transport can set its own boundary.

        Returns:
            A new header mapping on every call
        """
        # Content-Type is owned by the body encoding
        headers = {
            name: value for name, value in self.extra_headers.items()
            if name.lower() != 'content-type'
        }
        if self.user_agent:
            headers['User-Agent'] = self.user_agent
        if json:
            headers['Content-Type'] = self.CONTENT_TYPE_JSON

        token = self.store.get()
        if token:
            headers['Authorization'] = f"Bearer {token}"

        return headers
