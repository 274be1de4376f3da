"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

from job_board.auth.access import resolve_route_access
from job_board.auth.session import get_session, session_middleware_options
from job_board.config import get_config
from job_board.errors import DatabaseError, JobBoardError
from job_board.models import engine
from job_board.services.jobs import JobFilters, job_payload, list_jobs
from job_board.storage.database import init_database
from job_board.utils.logging_config import setup_logging

from .admin import router as admin_router
from .applications import router as applications_router
from .auth import router as auth_router
from .dashboard import router as dashboard_router
from .dependencies import get_db
from .jobs import router as jobs_router
from .notifications import router as notifications_router
from .saved_jobs import router as saved_jobs_router
from .system import router as system_router

logger = logging.getLogger("job_board.web")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(config)
    init_database(engine)
    yield


def _error_response(error: JobBoardError) -> JSONResponse:
    return JSONResponse({"error": error.message}, status_code=error.status_code)


def create_app() -> FastAPI:
    config = get_config()
    app = FastAPI(title="Job Board", lifespan=lifespan)

    @app.exception_handler(JobBoardError)
    async def job_board_error(request: Request, exc: JobBoardError):
        return _error_response(exc)

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(DatabaseError())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
        return JSONResponse({"error": f"Invalid request parameters: {fields}"}, status_code=422)

    # Route guard runs inside SessionMiddleware (added below, so outermost)
    @app.middleware("http")
    async def route_guard(request: Request, call_next):
        target = resolve_route_access(request.url.path, get_session(request))
        if target is not None:
            return RedirectResponse(target, status_code=303)
        return await call_next(request)

    # Signed cookie session
    app.add_middleware(SessionMiddleware, **session_middleware_options(config))

    # Routers
    app.include_router(auth_router)
    app.include_router(jobs_router)
    app.include_router(applications_router)
    app.include_router(saved_jobs_router)
    app.include_router(dashboard_router)
    app.include_router(admin_router)
    app.include_router(notifications_router)
    app.include_router(system_router)

    # Landing page: the featured jobs
    @app.get("/")
    def landing(db: Session = Depends(get_db)):
        featured = list_jobs(db, JobFilters(featured=True))
        return {"featured": [job_payload(job) for job in featured]}

    return app


app = create_app()
