# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from timesheet.models.enums import Role


class AuthContext(BaseModel):
    """Authenticated caller supplied by the identity provider."""

    user_id: uuid.UUID
    email: str = ""
    role: Role = Role.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
