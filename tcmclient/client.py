"""
TestCaseClient - High-level async client for the test-management backend.

Example:
    >>> async with TestCaseClient("work") as tcm:
    ...     menus = await tcm.get_menus_by_level(1)
    ...     result = await tcm.upload_test_cases("menu_1", "cases.xlsx", max_retries=2)
"""
import random
import string
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlencode

from .core.api import APIConfig, RequestDispatcher, RequestSpec
from .core.api.events import EventEmitter
from .core.exceptions import UnauthorizedError
from .core.logging import get_logger
from .core.session import CredentialStore, MemorySession, SQLiteSession
from .core.upload import UploadOptions, UploadOrchestrator, UploadProgress
from .core.upload.services import UploadSource

logger = get_logger('tcmclient.client')

_BASE36 = string.digits + string.ascii_lowercase


def _query(params: Dict[str, Any]) -> str:
    """Encode non-empty parameters as '?a=1&b=2', or '' when nothing is left."""
    cleaned = {}
    for key, value in params.items():
        if value is None or value == '':
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        cleaned[key] = value
    return f"?{urlencode(cleaned)}" if cleaned else ''


def generate_menu_id() -> str:
    """Client-side menu id: menu_<epoch ms>_<9 base36 chars>."""
    suffix = ''.join(random.choice(_BASE36) for _ in range(9))
    return f"menu_{int(time.time() * 1000)}_{suffix}"


class TestCaseClient:
    """
    High-level async client with credential persistence.

    Each endpoint method maps onto one RequestSpec; bulk uploads go through
    the UploadOrchestrator. When the backend answers 401 the stored
    credentials are cleared (see APIConfig.clear_on_unauthorized) and an
    'unauthorized' event is emitted before the error is re-raised.

    Args:
        session: Credential store, a session name for SQLiteSession, or
                 None for an in-memory store
        config: API configuration
    """

    # Not a pytest test class
    __test__ = False

    def __init__(
        self,
        session: Union[str, Path, CredentialStore, None] = None,
        config: Optional[APIConfig] = None
    ):
        if session is None:
            self._store: CredentialStore = MemorySession()
        elif isinstance(session, (str, Path)):
            self._store = SQLiteSession(session)
        else:
            self._store = session

        self._config = config or APIConfig.default()
        self._dispatcher = RequestDispatcher(self._config, self._store)
        self._uploads = UploadOrchestrator(self._dispatcher)
        self._event_emitter = EventEmitter()

    @property
    def store(self) -> CredentialStore:
        return self._store

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def is_authenticated(self) -> bool:
        return self._store.get() is not None

    def on(self, event: str, callback: Callable) -> 'TestCaseClient':
        """Register an event handler ('unauthorized' receives the error)."""
        self._event_emitter.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'TestCaseClient':
        self._event_emitter.off(event, callback)
        return self

    async def __aenter__(self) -> 'TestCaseClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session and the credential store."""
        await self._dispatcher.close()
        self._store.close()

    def login(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        """Store the bearer token (and user record) returned by the backend."""
        self._store.set(token, user)
        logger.info("Credentials stored")

    def logout(self) -> None:
        """Forget stored credentials."""
        self._store.clear()
        logger.info("Logged out")

    async def _call(self, spec: RequestSpec) -> Any:
        try:
            return await self._dispatcher.request(spec)
        except UnauthorizedError as e:
            if self._config.clear_on_unauthorized:
                self._store.clear()
            self._event_emitter.emit('unauthorized', e)
            raise

    # ==================== Menus ====================

    async def get_all_data(self) -> Any:
        """All menus and test cases (legacy endpoint)."""
        return await self._call(RequestSpec.get('/test-cases'))

    async def get_menus_by_level(self, level: int = 1) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/menus{_query({"level": level})}'))

    async def get_menu_children(self, parent_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/menus/{parent_id}/children'))

    async def get_test_cases_by_menu(self, menu_id: str) -> Any:
        """Compact test-case list of a menu."""
        return await self._call(RequestSpec.get(f'/test-cases/menus/{menu_id}/test-cases'))

    async def get_test_case_detail(self, test_case_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/{test_case_id}/detail'))

    async def create_menu(self, name: str) -> Any:
        return await self._call(RequestSpec.post(
            '/test-cases/menu',
            {'id': generate_menu_id(), 'name': name}
        ))

    async def update_menu(self, menu_id: str, name: str) -> Any:
        return await self._call(RequestSpec.put(f'/test-cases/menu/{menu_id}', {'name': name}))

    async def delete_menu(self, menu_id: str) -> Any:
        return await self._call(RequestSpec.delete(f'/test-cases/menu/{menu_id}'))

    async def get_menus(
        self,
        is_repository: Optional[bool] = None,
        level: Optional[int] = None
    ) -> Any:
        """Menus, optionally filtered to the case repository."""
        query = _query({'is_repository': is_repository, 'level': level})
        return await self._call(RequestSpec.get(f'/menus{query}'))

    # ==================== Test cases ====================

    async def get_test_cases(self, menu_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/menus/{menu_id}/test-cases'))

    async def create_test_case(self, test_case: Dict[str, Any]) -> Any:
        return await self._call(RequestSpec.post('/test-cases', test_case))

    async def create_test_cases_batch(self, test_cases: List[Dict[str, Any]]) -> Any:
        return await self._call(RequestSpec.post('/test-cases/batch', {'testCases': test_cases}))

    async def update_test_case(self, test_case_id: str, updates: Dict[str, Any]) -> Any:
        return await self._call(RequestSpec.put(f'/test-cases/{test_case_id}', updates))

    async def update_test_case_status(
        self,
        test_case_id: str,
        platform: str,
        status: str,
        fail_reason: str = ''
    ) -> Any:
        """Record a result for one platform."""
        return await self._call(RequestSpec.patch(
            f'/test-cases/{test_case_id}/status',
            {'platform': platform, 'status': status, 'fail_reason': fail_reason}
        ))

    async def move_test_case(self, test_case_id: str, target_menu_id: str) -> Any:
        return await self._call(RequestSpec.patch(
            f'/test-cases/{test_case_id}/move',
            {'targetMenuId': target_menu_id}
        ))

    async def delete_test_case(self, test_case_id: str) -> Any:
        return await self._call(RequestSpec.delete(f'/test-cases/{test_case_id}'))

    async def upload_test_cases(
        self,
        menu_id: str,
        file: UploadSource,
        options: Optional[UploadOptions] = None,
        *,
        timeout_ms: Optional[int] = None,
        max_retries: Optional[int] = None,
        on_progress: Optional[Callable[[UploadProgress], None]] = None
    ) -> Any:
        """
        Import a test-case file into a menu.

        Either pass an UploadOptions or the individual keyword settings;
        unset values keep the UploadOptions defaults.
        """
        if options is None:
            defaults = UploadOptions()
            options = UploadOptions(
                timeout_ms=timeout_ms if timeout_ms is not None else defaults.timeout_ms,
                max_retries=max_retries if max_retries is not None else defaults.max_retries,
                on_progress=on_progress,
            )
        return await self._uploads.upload(menu_id, file, options)

    async def search_failed_test_cases(self, keyword: Optional[str], menu_id: Optional[str] = None) -> Any:
        """Search failed test cases by failure reason."""
        query = _query({'keyword': keyword, 'menuId': menu_id})
        return await self._call(RequestSpec.get(f'/test-cases/search{query}'))

    async def get_stats(self, menu_id: Optional[str] = None) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/stats{_query({"menuId": menu_id})}'))

    # ==================== Smoke cases ====================

    async def get_smoke_menus(self, level: int = 1) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/smoke-menus{_query({"level": level})}'))

    async def get_smoke_menu_children(self, parent_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/smoke-menus/{parent_id}/children'))

    async def get_smoke_test_cases_by_menu(self, menu_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/menus/{menu_id}/smoke-test-cases'))

    async def get_smoke_test_case_detail(self, test_case_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/smoke-test-cases/{test_case_id}/detail'))

    # ==================== Automation ====================

    async def execute_test_case(
        self,
        test_case_id: str,
        platform: str,
        device_id: Optional[str] = None
    ) -> Any:
        return await self._call(RequestSpec.post(
            f'/test-cases/{test_case_id}/execute',
            {'platform': platform, 'deviceId': device_id}
        ))

    async def execute_batch_test_cases(
        self,
        test_case_ids: List[str],
        platform: str,
        device_id: Optional[str] = None
    ) -> Any:
        return await self._call(RequestSpec.post(
            '/automation/execute/batch',
            {'testCaseIds': list(test_case_ids), 'platform': platform, 'deviceId': device_id}
        ))

    async def get_execution_status(self, execution_id: str) -> Any:
        return await self._call(RequestSpec.get(f'/test-cases/executions/{execution_id}'))

    async def get_execution_history(self, test_case_id: str, limit: int = 10) -> Any:
        return await self._call(RequestSpec.get(
            f'/test-cases/{test_case_id}/executions{_query({"limit": limit})}'
        ))

    # ==================== Repository ====================

    async def create_version(self, data: Dict[str, Any]) -> Any:
        """Create a version by copying cases out of the repository."""
        return await self._call(RequestSpec.post('/versions/create', data))

    # ==================== User ====================

    async def get_current_user(self) -> Any:
        return await self._call(RequestSpec.get('/auth/me'))
