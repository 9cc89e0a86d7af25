"""Request construction and response classification."""
from .request_spec import RequestSpec, HTTPMethod, FilePart
from .header_builder import HeaderBuilder
from .response_handler import ResponseHandler

__all__ = [
    'RequestSpec',
    'HTTPMethod',
    'FilePart',
    'HeaderBuilder',
    'ResponseHandler',
]
