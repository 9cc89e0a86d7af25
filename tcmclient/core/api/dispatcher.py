"""
Async request dispatcher.

Single entry point for every HTTP call made to the test-management backend.
"""
import asyncio
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import aiohttp

from .config import APIConfig
from .events import EventEmitter
from .request import FilePart, HeaderBuilder, RequestSpec, ResponseHandler
from ..exceptions import NetworkError, RequestTimeoutError, TCMError
from ..logging import get_logger
from ..session import CredentialStore, MemorySession


class RequestDispatcher:
    """
    Asynchronous request dispatcher.

    Features:
    - Bearer authentication from an injected credential store
    - Uniform classification of transport and HTTP failures into TCMError
    - Every typed error logged and emitted as an 'error' event
    - Multipart transport for bulk uploads

    Example:
        >>> async with RequestDispatcher(APIConfig(), MemorySession("t0k")) as api:
        ...     menus = await api.request(RequestSpec.get('/test-cases/menus?level=1'))
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        store: Optional[CredentialStore] = None
    ):
        """
        Initialize dispatcher.

        Args:
            config: API configuration (uses defaults if not provided)
            store: Credential store read on every request
        """
        self._config = config or APIConfig.default()
        self._store = store if store is not None else MemorySession()
        self._headers = HeaderBuilder(
            self._store,
            user_agent=self._config.user_agent,
            extra_headers=self._config.extra_headers
        )
        self._session: Optional[aiohttp.ClientSession] = None
        self._event_emitter = EventEmitter()
        self._logger = get_logger('tcmclient.api')
        # basicConfig() not called yet
        if not logging.getLogger().handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def store(self) -> CredentialStore:
        return self._store

    @property
    def headers(self) -> HeaderBuilder:
        return self._headers

    def on(self, event: str, callback: Callable) -> 'RequestDispatcher':
        """Register an event handler ('error' receives the error and the spec)."""
        self._event_emitter.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'RequestDispatcher':
        """Remove an event handler."""
        self._event_emitter.off(event, callback)
        return self

    async def __aenter__(self) -> 'RequestDispatcher':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def request(self, spec: RequestSpec) -> Any:
        """
        Perform one API call.

        Args:
            spec: Request specification

        Returns:
            Parsed response body, unchanged

        Raises:
            NetworkError: Transport could not complete the call
            RequestTimeoutError: Configured request timeout expired
            UnauthorizedError: Backend answered 401
            HTTPStatusError: Backend answered any other non-2xx status
        """
        self._logger.debug(f"{spec.method.value} {spec.path}")
        try:
            status, data = await self._send(spec, json_body=True)
            return ResponseHandler.classify(status, data)
        except TCMError as e:
            self._report(spec, e)
            raise

    async def upload_transport(self, spec: RequestSpec) -> Any:
        """
        Send a multipart upload.

        No Content-Type header is set so aiohttp can add the multipart
        boundary; the Authorization header is still attached. The session
        timeout is disabled, the caller owns the deadline. A 401 here is a
        plain HTTPStatusError.

        Raises:
            NetworkError: Transport could not complete the call
            HTTPStatusError: Backend answered a non-2xx status
        """
        if not spec.is_multipart:
            raise ValueError("upload_transport needs a multipart RequestSpec")

        self._logger.debug(f"Upload {spec.method.value} {spec.path}")
        try:
            status, data = await self._send(spec, json_body=False, timeout=aiohttp.ClientTimeout())
            return ResponseHandler.classify(status, data, detect_unauthorized=False)
        except TCMError as e:
            self._report(spec, e)
            raise

    async def _send(
        self,
        spec: RequestSpec,
        json_body: bool,
        timeout: Optional[aiohttp.ClientTimeout] = None
    ) -> Tuple[int, Any]:
        """Run the HTTP exchange and return (status, parsed body)."""
        url = self._config.build_url(spec.path)
        kwargs: Dict[str, Any] = {
            'headers': self._headers.build(json=json_body),
            'proxy': self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None,
        }
        if spec.is_multipart:
            kwargs['data'] = self._build_form(spec.body)
        elif spec.body is not None:
            kwargs['data'] = json.dumps(spec.body)
        if timeout is not None:
            kwargs['timeout'] = timeout

        session = await self._ensure_session()

        try:
            async with session.request(spec.method.value, url, **kwargs) as response:
                raw = await response.read()
                text = self._decode(raw, response.charset)
                self._logger.debug(f"Response {response.status}: {text[:500] if len(text) > 500 else text}")
                return response.status, ResponseHandler.parse_body(text)
        except asyncio.TimeoutError as e:
            total = self._config.timeout.total
            suffix = f" after {total:g} seconds" if total else ""
            raise RequestTimeoutError(f"Request timed out{suffix}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error: {str(e) or type(e).__name__}") from e

    @staticmethod
    def _decode(raw: bytes, charset: Optional[str]) -> str:
        """Decode a body with its declared charset, utf-8 when missing or unknown."""
        try:
            return raw.decode(charset or 'utf-8', errors='replace')
        except LookupError:
            return raw.decode('utf-8', errors='replace')

    @staticmethod
    def _build_form(fields: Mapping[str, Any]) -> aiohttp.FormData:
        """Build a fresh multipart body (aiohttp consumes FormData once)."""
        form = aiohttp.FormData()
        for name, value in fields.items():
            if isinstance(value, FilePart):
                form.add_field(
                    name,
                    value.content,
                    filename=value.filename,
                    content_type=value.content_type
                )
            else:
                form.add_field(name, str(value))
        return form

    def _report(self, spec: RequestSpec, error: TCMError) -> None:
        """Log a typed error and notify 'error' listeners."""
        self._logger.error(f"API error on {spec.method.value} {spec.path}: {error}")
        self._event_emitter.emit('error', error, spec)
