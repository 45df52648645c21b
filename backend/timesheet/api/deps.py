# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header

from timesheet.exceptions import ForbiddenError
from timesheet.models.enums import Role
from timesheet.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_user_email: str = Header(default=""),
    x_role: Role = Header(default=Role.MEMBER),
) -> AuthContext:
    """Extract the caller's identity from request headers."""
    return AuthContext(user_id=x_user_id, email=x_user_email, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise ForbiddenError("Admin access required")
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]
