"""Request specifications for API calls."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union


class HTTPMethod(str, Enum):
    """HTTP methods used by the backend."""
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    PATCH = 'PATCH'
    DELETE = 'DELETE'


@dataclass(frozen=True)
class FilePart:
    """Binary field of a multipart payload."""
    filename: str
    content: bytes
    content_type: str = 'application/octet-stream'

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class RequestSpec:
    """
    Immutable description of one logical API call.

    Attributes:
        path: Endpoint relative to the base URL, e.g. '/test-cases/menus?level=1'
        method: HTTP method
        body: JSON-serializable payload, or for multipart requests a mapping
              of field name to str / FilePart
        is_multipart: Send body as multipart/form-data instead of JSON
    """
    path: str
    method: HTTPMethod = HTTPMethod.GET
    body: Any = None
    is_multipart: bool = False

    def __post_init__(self):
        if not isinstance(self.path, str) or not self.path.startswith('/'):
            raise ValueError(f"Endpoint path must be relative and start with '/': {self.path!r}")
        if not isinstance(self.method, HTTPMethod):
            try:
                method = HTTPMethod(str(self.method).upper())
            except ValueError:
                raise ValueError(f"Unsupported HTTP method: {self.method!r}") from None
            object.__setattr__(self, 'method', method)
        if self.is_multipart and not isinstance(self.body, Mapping):
            raise ValueError("Multipart requests need a mapping of form fields")

    @classmethod
    def get(cls, path: str) -> 'RequestSpec':
        return cls(path, HTTPMethod.GET)

    @classmethod
    def post(cls, path: str, body: Any = None) -> 'RequestSpec':
        return cls(path, HTTPMethod.POST, body)

    @classmethod
    def put(cls, path: str, body: Any = None) -> 'RequestSpec':
        return cls(path, HTTPMethod.PUT, body)

    @classmethod
    def patch(cls, path: str, body: Any = None) -> 'RequestSpec':
        return cls(path, HTTPMethod.PATCH, body)

    @classmethod
    def delete(cls, path: str) -> 'RequestSpec':
        return cls(path, HTTPMethod.DELETE)

    @classmethod
    def multipart(
        cls,
        path: str,
        fields: Mapping[str, Union[str, FilePart]]
    ) -> 'RequestSpec':
        """POST request carrying form fields and files."""
        return cls(path, HTTPMethod.POST, dict(fields), is_multipart=True)
