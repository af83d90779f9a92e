"""API routes."""

from staff_payroll.api.routes.attendance import router as attendance_router
from staff_payroll.api.routes.health import router as health_router
from staff_payroll.api.routes.part_time import router as part_time_router
from staff_payroll.api.routes.salary import router as salary_router
from staff_payroll.api.routes.staff import router as staff_router

__all__ = [
    "attendance_router",
    "health_router",
    "part_time_router",
    "salary_router",
    "staff_router",
]
