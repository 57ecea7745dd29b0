import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import OperationalError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from core.config import settings
from core.database import Base, engine
from core.errors import MarketplaceError, StoreUnavailable
from core.log_config import configure_logging
from routers import auth_router, profile_router, dashboard_router
from routers import project_router, version_router, comment_router
from routers import upload_router
from models import user, session, verification, profile, project, project_version, comment, rating  # noqa: F401

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Reel Marketplace API")

# Respect X-Forwarded-Proto/Host when behind a proxy (Docker/nginx/etc.)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

# CORS: allow all domains and headers/methods
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.exception_handler(MarketplaceError)
def marketplace_error_handler(request: Request, exc: MarketplaceError):
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(level, "%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    headers = {"Retry-After": "5"} if isinstance(exc, StoreUnavailable) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


@app.exception_handler(OperationalError)
def store_error_handler(request: Request, exc: OperationalError):
    logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc.orig)
    return marketplace_error_handler(request, StoreUnavailable())


app.include_router(auth_router.router)
app.include_router(profile_router.router)
app.include_router(dashboard_router.router)
app.include_router(project_router.router)
app.include_router(version_router.router)
app.include_router(comment_router.router)
app.include_router(upload_router.router)

# Static media mount for the local storage backend
os.makedirs(settings.MEDIA_DIR, exist_ok=True)
app.mount(
    settings.MEDIA_URL_PATH,
    StaticFiles(directory=settings.MEDIA_DIR),
    name="media",
)

@app.get("/")
def root():
    return {"message": "🎬 Reel Marketplace API Ready"}
