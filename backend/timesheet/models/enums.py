from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Caller role supplied by the identity provider."""

    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class EmploymentType(enum.StrEnum):
    """Employment classification; drives paid-holiday scaling."""

    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"


class MemberStatus(enum.StrEnum):
    """Account status reported by the member directory."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    LOCKED = "LOCKED"


class EntryType(enum.StrEnum):
    """Kind of hours recorded by a time entry."""

    REGULAR = "REGULAR"
    PAID_LEAVE = "PAID_LEAVE"
    APPROVED_LEAVE = "APPROVED_LEAVE"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ProjectStatus(enum.StrEnum):
    """Lifecycle status of a project."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"
