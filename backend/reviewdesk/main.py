from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reviewdesk.core.config import settings
from reviewdesk.core.edge_guard import EdgeGuardMiddleware
from reviewdesk.core.errors import register_error_handlers
from reviewdesk.core.logging_config import configure_logging
from reviewdesk.core.rate_limit import AllowAllRateLimiter, InMemoryRateLimiter, RateLimiter
from reviewdesk.core.role_guard import PageRedirect, page_redirect_handler
from reviewdesk.db.base import Base
from reviewdesk.db.session import engine
from reviewdesk.services.identity import resolve_request_session

# Import all models so SQLAlchemy can discover them for table creation
from reviewdesk import models  # noqa: F401

# Import API router and pages
from reviewdesk.api.api import api_router
from reviewdesk.pages import router as pages_router

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield


def build_rate_limiters() -> dict[str, RateLimiter]:
    """One limiter per scope: open endpoints and credential endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return {"public": AllowAllRateLimiter(), "auth": AllowAllRateLimiter()}
    return {
        "public": InMemoryRateLimiter(
            settings.RATE_LIMIT_PUBLIC_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
        ),
        "auth": InMemoryRateLimiter(
            settings.RATE_LIMIT_AUTH_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
        ),
    }


app = FastAPI(
    title=settings.APP_NAME,
    description="Resume review marketplace: uploads, reviewer pages, scoring and moderation",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.rate_limiters = build_rate_limiters()

register_error_handlers(app)
app.add_exception_handler(PageRedirect, page_redirect_handler)

# Edge guard runs inside CORS so preflight requests never reach it
app.add_middleware(EdgeGuardMiddleware, resolve=resolve_request_session)

# CORS Middleware - allowlist from env (comma-separated)
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in settings.BACKEND_CORS_ORIGINS.split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Include API router with /api/v1 prefix
app.include_router(api_router, prefix="/api/v1")
app.include_router(pages_router)
