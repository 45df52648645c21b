from sqlmodel import SQLModel

from timesheet.models.base import TimestampMixin, UUIDBase
from timesheet.models.clock_session import ClockSession
from timesheet.models.enums import (
    EmploymentType,
    EntryType,
    LeaveStatus,
    MemberStatus,
    ProjectStatus,
    Role,
)
from timesheet.models.holiday import PaidHoliday, PaidHolidayAssignment
from timesheet.models.leave_request import LeaveRequest
from timesheet.models.project import BudgetAdjustment, Project, ProjectMember
from timesheet.models.time_entry import TimeEntry

__all__ = [
    "BudgetAdjustment",
    "ClockSession",
    "EmploymentType",
    "EntryType",
    "LeaveRequest",
    "LeaveStatus",
    "MemberStatus",
    "PaidHoliday",
    "PaidHolidayAssignment",
    "Project",
    "ProjectMember",
    "ProjectStatus",
    "Role",
    "SQLModel",
    "TimeEntry",
    "TimestampMixin",
    "UUIDBase",
]
