"""
Data models for the upload module.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .guard import TimeoutGuard


@dataclass(frozen=True)
class UploadProgress:
    """
    Progress event passed to UploadOptions.on_progress.

    Attributes:
        status: Event type ('retrying')
        attempt: Retry number, starting at 1
        total: Configured max_retries
    """
    status: str
    attempt: int
    total: int

    RETRYING = 'retrying'

    @classmethod
    def retrying(cls, attempt: int, total: int) -> 'UploadProgress':
        return cls(cls.RETRYING, attempt, total)

    def to_dict(self) -> Dict[str, Any]:
        return {'status': self.status, 'attempt': self.attempt, 'total': self.total}


@dataclass
class UploadOptions:
    """
    Caller-supplied upload settings.

    Attributes:
        timeout_ms: Deadline for each attempt in milliseconds (default 5 minutes,
                    large imports take a while)
        max_retries: Extra attempts after the first failure (default 0, the
                     user retries by hand)
        on_progress: Called with an UploadProgress before each retry
    """
    timeout_ms: int = 300000
    max_retries: int = 0
    on_progress: Optional[Callable[[UploadProgress], None]] = None

    def __post_init__(self):
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be a positive integer, got {self.timeout_ms!r}")
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise ValueError(f"max_retries must be a non-negative integer, got {self.max_retries!r}")

    @property
    def timeout(self) -> float:
        """Deadline in seconds."""
        return self.timeout_ms / 1000

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1


@dataclass
class UploadAttempt:
    """State of one upload attempt; discarded once the attempt settles."""
    number: int
    guard: 'TimeoutGuard'

    @property
    def is_retry(self) -> bool:
        return self.number > 0
