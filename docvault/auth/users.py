"""
Demo User Directory

The identity side of the demo: three predefined users, one per role, whose
passwords are held only as bcrypt hashes.

This module is part of DocVault.
"""

import logging
from dataclasses import dataclass

import bcrypt

from ..exceptions import AuthenticationError
from .types import Role, Subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    id: str
    username: str
    name: str
    role: Role

    @property
    def subject(self) -> Subject:
        return Subject(id=self.id, role=self.role)

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "name": self.name, "role": self.role.value}


DEMO_USERS: tuple[User, ...] = (
    User(id="admin-id", username="admin", name="Admin User", role=Role.ADMIN),
    User(id="user-id", username="newuser", name="Regular User", role=Role.EDITOR),
    User(id="viewer-id", username="viewer", name="Viewer User", role=Role.VIEWER),
)


class UserDirectory:
    """
    In-memory user directory.

    Resolves subjects by ID for the boundary layer and verifies credentials
    for login.
    """

    def __init__(
        self,
        users: tuple[User, ...] = DEMO_USERS,
        password: str | None = None,
        bcrypt_rounds: int = 12,
    ):
        """
        Args:
            users: Users known to the directory
            password: Shared demo password; users without one cannot log in
            bcrypt_rounds: bcrypt cost factor for stored hashes
        """
        self._rounds = bcrypt_rounds
        self._by_id = {user.id: user for user in users}
        self._by_username = {user.username: user for user in users}
        self._password_hashes: dict[str, bytes] = {}
        if password:
            for user in users:
                self.set_password(user.username, password)

    def set_password(self, username: str, password: str) -> None:
        if username not in self._by_username:
            raise AuthenticationError(f"Unknown user '{username}'")
        self._password_hashes[username] = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)
        )

    def get(self, user_id: str) -> User | None:
        return self._by_id.get(user_id)

    def resolve_subject(self, user_id: str) -> Subject:
        """
        Resolve a subject ID to a Subject.

        Raises:
            AuthenticationError: If no user has this ID
        """
        user = self._by_id.get(user_id) if user_id else None
        if user is None:
            raise AuthenticationError("Unknown subject", context={"subject_id": user_id})
        return user.subject

    def authenticate(self, username: str, password: str) -> User | None:
        """
        Verify credentials.

        Returns:
            The user on success, None on unknown user or wrong password
        """
        user = self._by_username.get(username)
        password_hash = self._password_hashes.get(username)
        if user is None or password_hash is None:
            logger.info(f"Login failed: unknown user '{username}'")
            return None
        if not bcrypt.checkpw(password.encode("utf-8"), password_hash):
            logger.info(f"Login failed: bad password for '{username}'")
            return None
        logger.info(f"Login succeeded for '{username}' ({user.role.value})")
        return user
