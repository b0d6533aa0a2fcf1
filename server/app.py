"""FastAPI web server for the project management API."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from projectboard.config import Settings, get_settings
from projectboard.db.database import Database
from projectboard.services.auth_service import AuthService
from projectboard.errors import ServiceError
from server.routes import analytics, auth, dashboard, members, projects, tasks

logger = logging.getLogger(__name__)

ROUTE_GROUPS = (
    ("/auth", auth.router),
    ("/projects", projects.router),
    ("/projects/{project_id}/tasks", tasks.router),
    ("/projects/{project_id}/members", members.router),
    ("/projects/{project_id}/analytics", analytics.router),
    ("", dashboard.router),
)


def _validation_detail(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as ``{"detail": <message>}``."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": _validation_detail(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    db = db or Database(path=settings.DATABASE_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the database on startup."""
        db.init()
        purged = AuthService(db, settings.TOKEN_TTL_HOURS).purge_expired()
        logger.info(f"Server started - DB: {db.path} ({purged} expired sessions purged)")
        yield
        logger.info("Server shutting down")
        db.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Projects, tasks, team roles, analytics and dashboards",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "message": "Welcome to Project Management API",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
        }

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "healthy", "api": "project_management", "version": settings.APP_VERSION}

    @app.get("/healthz", tags=["Health"])
    async def healthz():
        return {"status": "ok"}

    for prefix, router in ROUTE_GROUPS:
        app.include_router(router, prefix=prefix)

    return app


app = create_app()
