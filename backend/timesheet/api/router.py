from fastapi import APIRouter

from timesheet.api.clock import clock_router
from timesheet.api.holidays import holidays_router
from timesheet.api.leave_requests import leave_requests_router
from timesheet.api.projects import projects_router
from timesheet.api.time_entries import admin_time_entries_router, time_entries_router

api_router = APIRouter()
api_router.include_router(time_entries_router)
api_router.include_router(admin_time_entries_router)
api_router.include_router(clock_router)
api_router.include_router(leave_requests_router)
api_router.include_router(projects_router)
api_router.include_router(holidays_router)
