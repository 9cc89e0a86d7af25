"""
Unit tests for credential stores.

Tests SQLiteSession, MemorySession, and Credentials.
"""
import pytest
import tempfile
from pathlib import Path

from tcmclient.core.session import (
    CredentialStore,
    Credentials,
    SQLiteSession,
    MemorySession
)


class TestCredentials:
    """Tests for Credentials model."""

    def test_create_credentials(self):
        """Test creating credentials."""
        data = Credentials(token="abc", user={"username": "qa"})

        assert data.token == "abc"
        assert data.user == {"username": "qa"}

    def test_to_dict(self):
        """Test converting to dictionary."""
        data = Credentials(token="abc")

        result = data.to_dict()

        assert result['token'] == "abc"
        assert result['user'] is None
        assert 'created_at' in result
        assert 'updated_at' in result

    def test_from_dict(self):
        """Test creating from dictionary."""
        data = Credentials.from_dict({
            'token': 'abc',
            'user': {'id': 7},
            'created_at': '2024-01-01T12:00:00',
            'updated_at': '2024-01-01T12:00:00'
        })

        assert data.token == "abc"
        assert data.user == {'id': 7}
        assert data.created_at.year == 2024

    def test_json_round_trip(self):
        """Test JSON serialization."""
        data = Credentials(token="abc", user={"username": "qa"})

        json_str = data.to_json()
        loaded = Credentials.from_json(json_str)

        assert '"token": "abc"' in json_str
        assert loaded.user == {"username": "qa"}

    def test_is_valid(self):
        """Test validation."""
        assert Credentials(token="abc").is_valid() is True
        assert Credentials(token="").is_valid() is False
        assert Credentials(token="   ").is_valid() is False

    def test_update_timestamp(self):
        """Test timestamp update."""
        data = Credentials(token="abc")
        old_time = data.updated_at

        data.update_timestamp()

        assert data.updated_at >= old_time


class TestMemorySession:
    """Tests for MemorySession store."""

    def test_implements_protocol(self):
        assert isinstance(MemorySession(), CredentialStore)

    def test_starts_unauthenticated(self):
        session = MemorySession()

        assert session.get() is None
        assert session.get_user() is None
        assert session.exists() is False

    def test_initial_token(self):
        session = MemorySession("abc", {"username": "qa"})

        assert session.get() == "abc"
        assert session.get_user() == {"username": "qa"}

    def test_set_and_get(self):
        session = MemorySession()

        session.set("abc")

        assert session.get() == "abc"
        assert session.exists() is True

    def test_set_rejects_empty_token(self):
        with pytest.raises(ValueError):
            MemorySession().set("")

    def test_clear(self):
        session = MemorySession("abc")

        session.clear()

        assert session.get() is None
        assert session.load() is None

    def test_context_manager(self):
        with MemorySession() as session:
            session.set("abc")
            assert session.exists() is True


class TestSQLiteSession:
    """Tests for SQLiteSession store."""

    @pytest.fixture
    def temp_session(self):
        """Create a temporary session file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            session = SQLiteSession("test_session", Path(tmpdir))
            yield session
            session.close()

    def test_implements_protocol(self, temp_session):
        assert isinstance(temp_session, CredentialStore)

    def test_creates_session_file(self):
        """Test that session file is created."""
        with tempfile.TemporaryDirectory() as tmpdir:
            session = SQLiteSession("my_account", Path(tmpdir))

            assert (Path(tmpdir) / "my_account.session").exists()

            session.close()

    def test_set_and_get(self, temp_session):
        temp_session.set("abc", {"username": "qa", "roles": ["tester"]})

        assert temp_session.get() == "abc"
        assert temp_session.get_user() == {"username": "qa", "roles": ["tester"]}

    def test_set_replaces_previous_token(self, temp_session):
        temp_session.set("first")
        temp_session.set("second")

        assert temp_session.get() == "second"

    def test_exists(self, temp_session):
        assert temp_session.exists() is False

        temp_session.set("abc")

        assert temp_session.exists() is True

    def test_clear(self, temp_session):
        temp_session.set("abc")

        temp_session.clear()

        assert temp_session.exists() is False
        assert temp_session.get() is None
        assert temp_session.load() is None

    def test_rejects_empty_token(self, temp_session):
        with pytest.raises(ValueError):
            temp_session.set("")

    def test_delete_file(self):
        """Test deleting session file completely."""
        with tempfile.TemporaryDirectory() as tmpdir:
            session = SQLiteSession("test_session", Path(tmpdir))
            session.set("abc")
            session_path = session.path

            assert session_path.exists()

            session.delete_file()

            assert not session_path.exists()

    def test_persistence(self):
        """Test that the token survives a new store instance."""
        with tempfile.TemporaryDirectory() as tmpdir:
            session1 = SQLiteSession("persistent", Path(tmpdir))
            session1.set("persistent-token", {"username": "qa"})
            session1.close()

            session2 = SQLiteSession("persistent", Path(tmpdir))
            loaded = session2.load()
            session2.close()

            assert loaded is not None
            assert loaded.token == "persistent-token"
            assert loaded.user == {"username": "qa"}

    def test_full_path_with_extension(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "work.session"
            session = SQLiteSession(str(path))

            assert session.path == path
            assert path.exists()

            session.close()
