import logging
import time
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from app.auth import cleanup_expired_sessions
from app.bootstrap import seed_admin
from app.database import SessionLocal, init_db
from app.errors import register_error_handlers
from app.logging_config import setup_logging
from app.routers import auth_router, clients_router
from app.store import ClientStore
from app.config import Settings, get_settings

settings = get_settings()
setup_logging(settings)
logger = logging.getLogger(__name__)


def run_bootstrap() -> None:
    """
    Seed the admin and purge stale sessions.

    Seed failures are logged; they stop startup only with require_admin_seed.
    """
    db = SessionLocal()
    try:
        try:
            seed_admin(ClientStore(db), settings.admin_email, settings.admin_password)
        except Exception:
            logger.exception("Admin seed error")
            if settings.require_admin_seed:
                raise
        cleanup_expired_sessions(db)
    finally:
        db.close()


def cors_options(settings: Settings) -> Optional[dict]:
    """
    CORSMiddleware arguments, or None for same-origin only.

    Debug allows any origin with credentials. Otherwise credentials go
    only to explicitly listed origins.
    """
    if settings.debug:
        origins, credentials = ["*"], True
    elif not settings.cors_origins:
        return None
    elif "*" in settings.cors_origins:
        origins, credentials = ["*"], False
    else:
        origins, credentials = settings.cors_origins, True
    return {
        "allow_origins": origins,
        "allow_credentials": credentials,
        "allow_methods": ["*"],
        "allow_headers": ["*"],
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    if settings.environment != "development" and settings.uses_default_secrets():
        logger.warning("Running %s with default session secret or admin password", settings.environment)
    # Schema failures propagate and abort startup
    init_db()
    run_bootstrap()
    logger.info("API ready on http://%s:%s", settings.host, settings.port)
    yield


app = FastAPI(
    title="Clients API",
    description="Session-authenticated contact list",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
# In production, list the frontend origins explicitly
cors = cors_options(settings)
if cors is not None:
    app.add_middleware(CORSMiddleware, **cors)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %d %.1f ms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


register_error_handlers(app)

# Register routers
app.include_router(auth_router.router)
app.include_router(clients_router.router)


@app.get("/health")
async def health():
    """
    Health check endpoint.
    """
    return {
        "status": "running",
        "version": "1.0.0"
    }


# Frontend, mounted last so API routes take precedence
if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
