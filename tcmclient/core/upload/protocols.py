"""
Protocol definitions for the upload module.
"""
from typing import Protocol, Any

from ..api.request import RequestSpec


class UploadTransport(Protocol):
    """Sends a multipart RequestSpec and returns the parsed body."""

    async def upload_transport(self, spec: RequestSpec) -> Any:
        ...
