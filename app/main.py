import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: in DEBUG create missing tables so a fresh checkout runs without
    # applying the Alembic migrations first.
    if settings.DEBUG:
        from app.database import Base, engine
        from app.models import Provider  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Tables ensured on %s", engine.url.render_as_string())
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

# Root redirects + unlocalized CSV export
from app.routers import home  # noqa: E402

app.include_router(home.router)

# Providers (localized)
from app.routers import providers  # noqa: E402

app.include_router(providers.router)
