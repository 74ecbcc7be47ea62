"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkshare import __version__
from linkshare.api.limiter import limiter
from linkshare.api.v1 import router as v1_router
from linkshare.core.config import Settings, get_settings
from linkshare.core.database import build_engine, build_session_factory
from linkshare.core.errors import register_exception_handlers
from linkshare.core.logging_config import configure_logging
from linkshare.core.security import prime_dummy_hash
from linkshare.models import Base
from linkshare.services.credentials import ensure_admin
from linkshare.services.identity import build_identity_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=app.state.engine)
    if settings.SEED_ADMIN:
        db = app.state.session_factory()
        try:
            ensure_admin(
                db,
                settings.ADMIN_USERNAME,
                settings.ADMIN_PASSWORD.get_secret_value(),
                settings.BCRYPT_ROUNDS,
            )
        finally:
            db.close()
    prime_dummy_hash(settings.BCRYPT_ROUNDS)
    logger.info(
        "Linkshare started: env=%s auth_mode=%s",
        settings.APP_ENV,
        settings.AUTH_MODE,
    )
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app around explicit settings; engine, sessions and identity provider hang off app.state."""
    settings = settings or get_settings()
    configure_logging(settings)
    # Counters start empty for each app; limits are read per request from app.state.settings.
    limiter.reset()

    app = FastAPI(
        title="Linkshare API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.identity_provider = build_identity_provider(settings)
    # slowapi looks for app.state.limiter by convention.
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Linkshare API"}

    return app
