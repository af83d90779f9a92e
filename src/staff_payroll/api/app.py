"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from staff_payroll import __version__
from staff_payroll.api.routes import (
    attendance_router,
    health_router,
    part_time_router,
    salary_router,
    staff_router,
)
from staff_payroll.database import dispose_db, init_db
from staff_payroll.exceptions import (
    InputIntegrityError,
    RecordNotFoundError,
    StaffNotFoundError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Staff Payroll API",
        description="Attendance, salary and advance tracking for shop staff",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(InputIntegrityError)
    async def input_integrity_handler(
        request: Request, exc: InputIntegrityError
    ) -> JSONResponse:
        """Rejected entries: 409 for conflicts, 422 for invalid input."""
        return JSONResponse(
            status_code=(
                status.HTTP_409_CONFLICT
                if exc.is_conflict
                else status.HTTP_422_UNPROCESSABLE_ENTITY
            ),
            content={"detail": exc.message, "code": exc.reason},
        )

    @app.exception_handler(StaffNotFoundError)
    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "NOT_FOUND"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(staff_router, prefix="/api/v1")
    app.include_router(attendance_router, prefix="/api/v1")
    app.include_router(salary_router, prefix="/api/v1")
    app.include_router(part_time_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
