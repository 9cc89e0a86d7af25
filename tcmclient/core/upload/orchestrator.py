"""
Upload orchestrator.

Runs bulk test-case imports: one multipart request per attempt, each under
its own deadline, retried a bounded number of times.
"""
import asyncio
from typing import Any, Optional

from .guard import TimeoutGuard
from .models import UploadAttempt, UploadOptions, UploadProgress
from .protocols import UploadTransport
from .services import AsyncFileReader, UploadSource
from ..api.request import FilePart, RequestSpec
from ..exceptions import AbortedError, RequestTimeoutError, TCMError
from ..logging import get_logger

logger = get_logger('tcmclient.upload')


class UploadOrchestrator:
    """
    Coordinates bulk uploads.

    Attempts run strictly one after another. Before every retry the
    progress callback is told, then a fixed RETRY_DELAY elapses. Every
    TCMError is retried the same way, 401 included; after max_retries the
    last error is raised.
    """

    UPLOAD_PATH = '/test-cases/upload'
    TARGET_FIELD = 'menuId'
    FILE_FIELD = 'file'

    # seconds between attempts
    RETRY_DELAY = 2.0

    def __init__(
        self,
        transport: UploadTransport,
        file_reader: Optional[AsyncFileReader] = None
    ):
        """
        Initialize upload orchestrator.

        Args:
            transport: Object exposing upload_transport(), usually the RequestDispatcher
            file_reader: Loads paths and bytes into a FilePart
        """
        self._transport = transport
        self._file_reader = file_reader or AsyncFileReader()

    async def upload(
        self,
        target_id: str,
        file: UploadSource,
        options: Optional[UploadOptions] = None
    ) -> Any:
        """
        Upload a test-case file into a menu.

        Args:
            target_id: Menu receiving the imported test cases
            file: Path, raw bytes or FilePart
            options: Timeout, retry and progress settings

        Returns:
            Parsed response body of the successful attempt

        Raises:
            RequestTimeoutError: Last attempt hit its deadline
            HTTPStatusError: Last attempt got a non-2xx status
            NetworkError: Last attempt could not reach the backend
            AbortedError: Last attempt was cancelled from outside the guard
        """
        options = options or UploadOptions()
        part = await self._file_reader.load(file)
        logger.info(
            f"Uploading {part.filename} ({part.size / 1024:.1f} KB) to menu {target_id}"
        )

        last_error: Optional[TCMError] = None

        for number in range(options.total_attempts):
            if number > 0:
                logger.info(f"Retrying upload ({number}/{options.max_retries})...")
                self._notify(options, UploadProgress.retrying(number, options.max_retries))
                await asyncio.sleep(self.RETRY_DELAY)

            attempt = UploadAttempt(number=number, guard=TimeoutGuard(options.timeout))
            try:
                result = await self._run_attempt(attempt, target_id, part, options)
                logger.info(f"Upload to menu {target_id} succeeded on attempt {number + 1}")
                return result
            except TCMError as e:
                last_error = e
                if number < options.max_retries:
                    logger.warning(f"Upload failed, retrying: {e}")
                    continue
                logger.error(f"Upload failed: {e}")
                raise

        raise last_error or AbortedError('Upload failed')

    async def _run_attempt(
        self,
        attempt: UploadAttempt,
        target_id: str,
        part: FilePart,
        options: UploadOptions
    ) -> Any:
        """Run one attempt; its timer and request are released before returning."""
        spec = RequestSpec.multipart(
            self.UPLOAD_PATH,
            {self.TARGET_FIELD: target_id, self.FILE_FIELD: part}
        )
        async with attempt.guard as guard:
            try:
                return await guard.run(self._transport.upload_transport(spec))
            except AbortedError as e:
                if guard.fired:
                    raise RequestTimeoutError.for_upload(options.timeout_ms) from e
                raise

    @staticmethod
    def _notify(options: UploadOptions, progress: UploadProgress) -> None:
        if options.on_progress is not None:
            options.on_progress(progress)
