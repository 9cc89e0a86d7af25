"""Test-management API module: configuration, request building and dispatch."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, DEFAULT_BASE_URL
from .events import EventEmitter
from .request import RequestSpec, HTTPMethod, FilePart, HeaderBuilder, ResponseHandler
from .dispatcher import RequestDispatcher

__all__ = [
    # Dispatcher
    'RequestDispatcher',
    
    # Requests
    'RequestSpec',
    'HTTPMethod',
    'FilePart',
    'HeaderBuilder',
    'ResponseHandler',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'DEFAULT_BASE_URL',
    
    # Events
    'EventEmitter',
]
