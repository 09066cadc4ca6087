"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sabq.api.v1.router import api_router
from sabq.config import Settings, get_settings
from sabq.core.logging import get_logger, setup_logging
from sabq.core.middleware import ObservabilityMiddleware
from sabq.schemas.template import TemplatesManifest
from sabq.services.playground import load_demo_articles
from sabq.services.template_manifest import TemplateRegistry, fetch_manifest, load_manifest

logger = get_logger(__name__)


async def _load_manifest(settings: Settings) -> TemplatesManifest:
    if settings.manifest_url:
        return await fetch_manifest(
            settings.manifest_url,
            timeout=settings.manifest_fetch_timeout_seconds,
        )
    return load_manifest(settings.manifest_path)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging()
        manifest = await _load_manifest(settings)
        app.state.templates = TemplateRegistry(manifest)
        app.state.demo_articles = load_demo_articles(settings.demo_articles_path)
        logger.info("app_started", templates=len(app.state.templates))
        yield

    app = FastAPI(title="Sabq Publishing Templates", lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings
    app.add_middleware(ObservabilityMiddleware)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
