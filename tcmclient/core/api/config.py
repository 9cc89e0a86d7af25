"""
API configuration module.

Settings for the HTTP layer of the test-management client.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import ssl

import aiohttp

DEFAULT_BASE_URL = 'https://test-management-backend-3fib.onrender.com/api'


@dataclass
class ProxyConfig:
    """HTTP(S) proxy, optionally with basic credentials."""
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Proxy URL as aiohttp expects it, credentials inlined."""
        if not self.url:
            return None
        if self.username and self.password and '://' in self.url:
            scheme, host = self.url.split('://', 1)
            return f"{scheme}://{self.username}:{self.password}@{host}"
        return self.url


@dataclass
class SSLConfig:
    """TLS settings for the backend connection."""
    verify: bool = True
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self):
        """SSLContext for the connector, or False to skip verification."""
        if not self.verify:
            return False

        context = ssl.create_default_context(cafile=self.ca_file)
        context.check_hostname = self.check_hostname
        return context


@dataclass
class TimeoutConfig:
    """
    Timeouts for JSON requests, in seconds.

    Bulk uploads are not bound by it; their deadline comes from
    UploadOptions.timeout_ms.
    """
    total: Optional[float] = 60.0
    connect: Optional[float] = 30.0
    sock_read: Optional[float] = None
    sock_connect: Optional[float] = 30.0

    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Attributes:
        base_url: Backend root, endpoint paths are appended to it
        user_agent: Sent with every request
        proxy: Optional proxy
        ssl: TLS settings
        timeout: JSON request timeouts
        extra_headers: Added to every request
        log_level: Level of the 'tcmclient.api' logger when logging is unconfigured
        limit: Connection pool size
        limit_per_host: Connections per host
        clear_on_unauthorized: Drop stored credentials when the backend answers 401
    """
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = 'tcmclient/0.1.0'
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    log_level: int = 20  # logging.INFO
    limit: int = 100
    limit_per_host: int = 10
    clear_on_unauthorized: bool = True

    @classmethod
    def default(cls) -> 'APIConfig':
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        return cls(proxy=ProxyConfig(url=proxy_url), **kwargs)

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Configuration that skips certificate verification (local backends)."""
        return cls(ssl=SSLConfig(verify=False, check_hostname=False), **kwargs)

    def build_url(self, path: str) -> str:
        """Join the base URL and a relative endpoint path."""
        return f"{self.base_url.rstrip('/')}{path}"

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for aiohttp.TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for aiohttp.ClientSession."""
        return {'timeout': self.timeout.to_aiohttp_timeout()}
