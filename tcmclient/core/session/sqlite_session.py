"""
SQLite credential store.

Persists the bearer token and user record in a local SQLite file so a
login survives process restarts.
"""
import json
import sqlite3
import threading
from pathlib import Path
from datetime import datetime
from typing import Optional, Union, Dict, Any
from contextlib import contextmanager

from .protocols import CredentialStore
from .models import Credentials


class SQLiteSession(CredentialStore):
    """
    SQLite-based credential store.

    Thread-safe; a single connection is shared behind a lock.

    Example:
        >>> session = SQLiteSession("work")
        >>> # Creates work.session file
        >>> session.set("token-123", {"username": "qa"})
        >>> session.get()
        'token-123'
    """

    EXTENSION = '.session'
    SCHEMA_VERSION = 1

    def __init__(
        self,
        session_name: Union[str, Path],
        base_path: Optional[Path] = None
    ):
        """
        Initialize SQLite credential store.

        Args:
            session_name: Session name (without extension) or full path
            base_path: Optional base directory for session files
        """
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None

        if isinstance(session_name, Path) or session_name.endswith(self.EXTENSION):
            self._path = Path(session_name)
        elif base_path:
            self._path = base_path / f"{session_name}{self.EXTENSION}"
        else:
            self._path = Path(f"{session_name}{self.EXTENSION}")

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @property
    def path(self) -> Path:
        """Get session file path."""
        return self._path

    @contextmanager
    def _get_connection(self):
        """Get thread-safe database connection."""
        with self._lock:
            if self._conn is None:
                self._conn = sqlite3.connect(
                    str(self._path),
                    check_same_thread=False
                )
                self._conn.row_factory = sqlite3.Row
            yield self._conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS version (
                    version INTEGER PRIMARY KEY
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS credentials (
                    id INTEGER PRIMARY KEY,
                    token TEXT NOT NULL,
                    user_json TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            ''')

            cursor.execute('SELECT version FROM version LIMIT 1')
            if cursor.fetchone() is None:
                cursor.execute(
                    'INSERT INTO version (version) VALUES (?)',
                    (self.SCHEMA_VERSION,)
                )

            conn.commit()

    def load(self) -> Optional[Credentials]:
        """
        Load the full credential record.

        Returns:
            Credentials if stored, None otherwise
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT token, user_json, created_at, updated_at
                FROM credentials
                LIMIT 1
            ''')

            row = cursor.fetchone()
            if row is None:
                return None

            return Credentials(
                token=row['token'],
                user=json.loads(row['user_json']) if row['user_json'] else None,
                created_at=datetime.fromisoformat(row['created_at']),
                updated_at=datetime.fromisoformat(row['updated_at']),
            )

    def save(self, data: Credentials) -> None:
        """
        Replace the stored credential record.

        Args:
            data: Credentials to save
        """
        if not data.is_valid():
            raise ValueError("Token must be a non-empty string")
        data.update_timestamp()

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM credentials')
            cursor.execute('''
                INSERT INTO credentials (token, user_json, created_at, updated_at)
                VALUES (?, ?, ?, ?)
            ''', (
                data.token,
                json.dumps(data.user) if data.user is not None else None,
                data.created_at.isoformat(),
                data.updated_at.isoformat(),
            ))
            conn.commit()

    def get(self) -> Optional[str]:
        data = self.load()
        return data.token if data else None

    def set(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.save(Credentials(token=token, user=user))

    def get_user(self) -> Optional[Dict[str, Any]]:
        data = self.load()
        return data.user if data else None

    def clear(self) -> None:
        """Delete stored credentials."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM credentials')
            conn.commit()

    def exists(self) -> bool:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COUNT(*) FROM credentials')
            return cursor.fetchone()[0] > 0

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def delete_file(self) -> None:
        """Delete the session file completely."""
        self.close()
        if self._path.exists():
            self._path.unlink()

    def __enter__(self) -> 'SQLiteSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
