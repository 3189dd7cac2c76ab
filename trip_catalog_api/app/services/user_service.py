"""
Business logic for catalog administrators.

Users exist only to obtain tokens for the write endpoints.  Passwords
are stored as PBKDF2 hashes (see ``core.security``).
"""

import logging
import sqlite3
from typing import Any, Dict, Optional

from ..core.db import Database
from ..core.errors import PersistenceError, TripCatalogError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserCreate


logger = logging.getLogger(__name__)


class UserService:
    """Registration and credential checks backed by the ``users`` table."""

    def __init__(self, database: Database):
        self.database = database

    def get_user(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            with self.database.get_cursor() as cursor:
                row = cursor.execute(
                    "SELECT id, email, name, password FROM users WHERE email = ?",
                    (email.strip().lower(),),
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        return dict(row) if row else None

    async def register(self, data: UserCreate) -> Dict[str, Any]:
        """Create a user.  Raises ``TripCatalogError`` (409) if the email is taken."""
        logger.info("Registering user %s", data.email)
        try:
            with self.database.get_cursor() as cursor:
                cursor.execute(
                    "INSERT INTO users (email, name, password) VALUES (?, ?, ?)",
                    (data.email, data.name, hash_password(data.password)),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise TripCatalogError("A user with this email already exists", status_code=409) from e
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        return {"id": user_id, "email": data.email, "name": data.name}

    async def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Return the user when the password matches, else ``None``."""
        user = self.get_user(email)
        if user is None or not verify_password(password, user["password"]):
            logger.warning("Failed login for %s", email)
            return None
        return user
