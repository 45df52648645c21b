# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from timesheet.models.enums import EmploymentType, MemberStatus, Role


class MemberInfo(BaseModel):
    """Member metadata from the identity / member directory service."""

    id: uuid.UUID
    email: str
    full_name: str
    role: Role = Role.MEMBER
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    status: MemberStatus = MemberStatus.ACTIVE


@runtime_checkable
class MemberService(Protocol):
    """Interface for the member directory."""

    async def get_member(self, user_id: uuid.UUID) -> MemberInfo | None:
        """Fetch member metadata. Returns None if not found."""
        ...

    async def list_members(self) -> list[MemberInfo]:
        """List every known member."""
        ...


class InMemoryMemberService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._members: dict[uuid.UUID, MemberInfo] = {}

    def seed(self, member: MemberInfo) -> None:
        """Seed a member for testing."""
        self._members[member.id] = member

    async def get_member(self, user_id: uuid.UUID) -> MemberInfo | None:
        """Fetch member metadata. Returns None if not found."""
        return self._members.get(user_id)

    async def list_members(self) -> list[MemberInfo]:
        """List every known member."""
        return list(self._members.values())


_member_service: MemberService = InMemoryMemberService()


def get_member_service() -> MemberService:
    """Return the configured member directory."""
    return _member_service


def set_member_service(service: MemberService) -> None:
    """Override the service (for testing or production wiring)."""
    global _member_service
    _member_service = service


async def get_members_by_id(user_ids: list[uuid.UUID]) -> dict[uuid.UUID, MemberInfo]:
    """Resolve the given ids against the directory, dropping unknown ones."""
    service = get_member_service()
    members: dict[uuid.UUID, MemberInfo] = {}
    for user_id in user_ids:
        member = await service.get_member(user_id)
        if member is not None:
            members[member.id] = member
    return members


async def list_active_members() -> list[MemberInfo]:
    """List members whose account status is ACTIVE."""
    members = await get_member_service().list_members()
    return [m for m in members if m.status == MemberStatus.ACTIVE]
