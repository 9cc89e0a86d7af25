"""
Credential data models.

Contains the data class stored by credential stores.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any
import json


@dataclass
class Credentials:
    """
    Bearer credentials for the test-management backend.

    Attributes:
        token: Opaque bearer token returned at login
        user: User record returned alongside the token (optional)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """
    token: str
    user: Optional[Dict[str, Any]] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            'token': self.token,
            'user': self.user,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Credentials':
        """
        Create from dictionary.

        Args:
            data: Dictionary with credential data

        Returns:
            Credentials instance
        """
        return cls(
            token=data['token'],
            user=data.get('user'),
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else datetime.now(),
            updated_at=datetime.fromisoformat(data['updated_at']) if data.get('updated_at') else datetime.now(),
        )

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'Credentials':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def is_valid(self) -> bool:
        """Check that a non-blank token is present."""
        return bool(self.token and self.token.strip())

    def update_timestamp(self) -> None:
        """Update the updated_at timestamp to now."""
        self.updated_at = datetime.now()
