"""
Accounts Backend - FastAPI Application

Session-based authentication (LDAP or local store), password resets and
feedback logging on MongoDB.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from app.config import get_settings
from app.core.errors import ADMIN_REQUIRED
from app.database.connections import get_mongo_client, close_connections
from app.database.registry import sync_registry, create_indexes
from app.dependencies.auth import AdminRequired, LoginRequired, SignupUnavailable
from app.routers import auth, feedback, health

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("accounts_backend")

FORBIDDEN_PAGE = """<!DOCTYPE html>
<html>
<head><title>403 Forbidden</title></head>
<body>
<h1>403 Forbidden</h1>
<p>{message}</p>
</body>
</html>
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Sync database registry
    - Create indexes

    Shutdown:
    - Close all database connections
    """
    logger.info("Starting up Accounts Backend...")
    logger.info(f"Authentication backend: {'ldap' if settings.auth_use_ldap else 'local'}")

    try:
        client = await get_mongo_client()
        await sync_registry(client)
        await create_indexes(client)
        logger.info("Database registry synced and indexes created")
    except Exception as e:
        logger.warning(f"Database initialization warning: {e}")

    yield

    logger.info("Shutting down Accounts Backend...")
    await close_connections()
    logger.info("Database connections closed")


app = FastAPI(
    title="Accounts API",
    description="""
## Accounts and Feedback API

### Features
- **Authentication**: LDAP directory or local bcrypt credential store
- **Sessions**: signed cookie sessions gate protected and admin routes
- **Password reset**: single-use, time-limited reset keys sent by mail
- **Feedback**: users post feedback, administrators review it

### Sessions
Log in via `POST /auth/login`. Protected pages redirect to the login page
when no session is present; admin routes answer 403.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(get_settings().login_url, status_code=status.HTTP_302_FOUND)


@app.exception_handler(SignupUnavailable)
async def signup_unavailable_handler(request: Request, exc: SignupUnavailable):
    return RedirectResponse(get_settings().signup_url, status_code=status.HTTP_302_FOUND)


@app.exception_handler(AdminRequired)
async def admin_required_handler(request: Request, exc: AdminRequired):
    if exc.xhr:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": True, "response": ADMIN_REQUIRED},
        )
    return HTMLResponse(
        FORBIDDEN_PAGE.format(message=ADMIN_REQUIRED),
        status_code=status.HTTP_403_FORBIDDEN,
    )


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(feedback.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Accounts API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
