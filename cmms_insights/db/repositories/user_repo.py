"""
Repository for ``users``.
"""

from __future__ import annotations

from typing import Optional

from cmms_insights.db.repositories.base import BaseRepository
from cmms_insights.models.user import User
from cmms_insights.taxonomy.maintenance_taxonomy import TECHNICIAN_ROLES

_USER_COLUMNS = list(User.model_fields)


class UserRepository(BaseRepository):
    """Read/write access to ``users``."""

    def upsert_user(self, user: User) -> None:
        row = user.model_dump(mode="json")
        self.upsert(
            "users", "user_id", _USER_COLUMNS,
            [row[col] for col in _USER_COLUMNS],
        )

    def get_all(self) -> list[User]:
        rows = self.fetchall("SELECT * FROM users ORDER BY rowid;")
        return [User.model_validate(dict(r)) for r in rows]

    def get_by_id(self, user_id: int) -> Optional[User]:
        row = self.fetchone("SELECT * FROM users WHERE user_id = ?;", (user_id,))
        return User.model_validate(dict(row)) if row else None

    def get_technicians(self) -> list[User]:
        """Users eligible for assignment (Technician or Engineer role)."""
        roles = sorted(role.value for role in TECHNICIAN_ROLES)
        placeholders = ", ".join("?" for _ in roles)
        rows = self.fetchall(
            f"SELECT * FROM users WHERE role IN ({placeholders}) ORDER BY rowid;",
            tuple(roles),
        )
        return [User.model_validate(dict(r)) for r in rows]
