# backoffice/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from backoffice.adapters.configuration.config import settings
from backoffice.adapters.inbound.api.v1.router import api_router as api_v1_router
from backoffice.adapters.outbound.persistence.database import engine, Base
from backoffice.shared.middleware import AsyncExceptionMiddleware, AsyncRequestLoggingMiddleware

# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)
# ────────────────────────────────────────────────────────────────────────────────

OPENAPI_TAGS = [
    {"name": "Auth", "description": "Menus and permission codes of the authenticated admin"},
    {"name": "Roles", "description": "Role management and delegation"},
    {"name": "Permissions", "description": "Permission catalogue"},
    {"name": "Admins", "description": "Role assignment to admins"},
]


def _seed(sync_conn) -> None:
    from backoffice.adapters.outbound.persistence.seeds import run_all_seeds

    with Session(bind=sync_conn) as session:
        run_all_seeds(session)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create missing tables, optionally seed, and release the pool on shutdown.
    """
    logger.info("Application starting up...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        if settings.SEED_ON_STARTUP:
            logger.info("Seeding default roles and permissions")
            await conn.run_sync(_seed)

    yield

    logger.info("Application shutting down...")
    await engine.dispose()


app = FastAPI(
    title="Back-office",
    description="Ad-platform back-office authorization core",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
    openapi_tags=OPENAPI_TAGS,
)

# Last added is outermost: CORS, then request logging, then exception rendering
app.add_middleware(AsyncExceptionMiddleware)
app.add_middleware(AsyncRequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def redirect_to_docs():
    return RedirectResponse(url="/docs")


def custom_openapi():
    """OpenAPI schema without the generic 422 validation responses."""
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=OPENAPI_TAGS,
    )

    components = schema.get("components", {}).get("schemas", {})
    for name in ("HTTPValidationError", "ValidationError"):
        components.pop(name, None)

    for operations in schema.get("paths", {}).values():
        for operation in operations.values():
            operation.get("responses", {}).pop("422", None)

    app.openapi_schema = schema
    return schema


app.openapi = custom_openapi
