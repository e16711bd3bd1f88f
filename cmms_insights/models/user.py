"""
User model.

Credentials and digital signatures are not modelled here. The engine only
needs identity, role and home location to rank technicians.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from cmms_insights.taxonomy.maintenance_taxonomy import TECHNICIAN_ROLES, UserRole


class User(BaseModel):
    """A system user.

    Attributes:
        user_id: User PK.
        name: Full display name.
        role: Hospital role.
        email: Contact e-mail.
        location_id: Home location; ``None`` for roaming staff.
        phone_number: Optional phone number.
        department: Free-text department label from the user profile.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    name: str
    role: UserRole
    email: str = ""
    location_id: Optional[int] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None

    @property
    def is_technician(self) -> bool:
        return self.role in TECHNICIAN_ROLES
