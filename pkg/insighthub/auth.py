"""
Account registration and login against the JSON store.

Passwords are kept verbatim in the data file. This mirrors the dashboard's
existing data format and is not safe for anything beyond local use.
"""
import logging
from typing import Any, Dict

from .errors import AlreadyExists, InvalidCredentials, InvalidInput
from .schema import User
from .store import JsonStore, next_id

logger = logging.getLogger(__name__)


class AccountManager:
    """Registers users and checks credentials."""

    def __init__(self, store: JsonStore):
        self.store = store

    def register(self, email, password) -> Dict[str, Any]:
        """Create a user. Returns only the public fields (id, email)."""
        if not _present(email) or not _present(password):
            raise InvalidInput("Email and password required")

        with self.store.transaction() as doc:
            if any(u.email == email for u in doc.users):
                raise AlreadyExists("User already exists")
            user = User(
                id=next_id(u.id for u in doc.users),
                email=email,
                password=password,
            )
            doc.users.append(user)

        logger.info(f"Registered user {user.id}")
        return user.public_dict()

    def login(self, email, password) -> Dict[str, Any]:
        doc = self.store.snapshot()
        for user in doc.users:
            if user.email == email and user.password == password:
                return user.public_dict()
        logger.debug("Login rejected")
        raise InvalidCredentials("Invalid credentials")


def _present(value) -> bool:
    return isinstance(value, str) and bool(value.strip())
