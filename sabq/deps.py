"""FastAPI dependencies — startup-loaded manifest, registries and demo data."""

from typing import Annotated

from fastapi import Depends, Request

from sabq.config import Settings, get_settings
from sabq.schemas.content import ContentItem
from sabq.services.template_manifest import TemplateRegistry
from sabq.services.template_renderer import RendererRegistry, renderer_registry


def get_template_registry(request: Request) -> TemplateRegistry:
    return request.app.state.templates


def get_demo_articles(request: Request) -> list[ContentItem]:
    return request.app.state.demo_articles


def get_renderer_registry() -> RendererRegistry:
    return renderer_registry


AppSettings = Annotated[Settings, Depends(get_settings)]
Templates = Annotated[TemplateRegistry, Depends(get_template_registry)]
DemoArticles = Annotated[list[ContentItem], Depends(get_demo_articles)]
Renderers = Annotated[RendererRegistry, Depends(get_renderer_registry)]
