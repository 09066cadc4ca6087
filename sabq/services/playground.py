"""Template playground: preview templates and recommendations against demo datasets."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, TypeAdapter

from sabq.core.logging import get_logger
from sabq.schemas.content import ContentItem, NewsType
from sabq.schemas.recommendation import ContentAnalysis, RecommendationRead
from sabq.schemas.template import TemplateDescriptor, TemplatesManifest
from sabq.services.content_analyzer import DEFAULT_TIME_SENSITIVE_HOURS, analyze_content
from sabq.services.template_renderer import RenderContractError, RenderedBlock, renderer_registry
from sabq.services.template_selector import recommend_templates

logger = get_logger(__name__)

_ITEMS_ADAPTER = TypeAdapter(list[ContentItem])


@dataclass(frozen=True)
class Dataset:
    name: str
    label: str
    predicate: Callable[[ContentItem], bool]
    limit: int


DATASETS: dict[str, Dataset] = {
    d.name: d
    for d in (
        Dataset("breaking-news", "أخبار عاجلة (5)", lambda a: a.news_type == NewsType.BREAKING, 5),
        Dataset("featured", "مميزة (6)", lambda a: a.news_type == NewsType.FEATURED, 6),
        Dataset("mixed", "متنوعة (8)", lambda a: True, 8),
        Dataset("single", "مقال واحد (1)", lambda a: True, 1),
        Dataset("many", "كثيرة (15)", lambda a: True, 15),
    )
}

DEFAULT_DATASET = "mixed"
DEFAULT_TEMPLATE_ID = "hero.split"


class DatasetInfo(BaseModel):
    name: str
    label: str
    limit: int


class PlaygroundView(BaseModel):
    dataset: str
    items: list[ContentItem]
    analysis: ContentAnalysis
    recommendations: list[RecommendationRead]
    template: TemplateDescriptor | None = None
    preview: RenderedBlock | None = None
    preview_error: str | None = None


def load_demo_articles(path: str | Path) -> list[ContentItem]:
    """Load the demo article fixture."""
    articles_path = Path(path)
    if not articles_path.exists():
        raise FileNotFoundError(f"Demo articles not found: {articles_path}")
    articles = _ITEMS_ADAPTER.validate_python(json.loads(articles_path.read_text(encoding="utf-8")))
    logger.info("demo_articles_loaded", path=str(articles_path), count=len(articles))
    return articles


def list_datasets() -> list[DatasetInfo]:
    return [DatasetInfo(name=d.name, label=d.label, limit=d.limit) for d in DATASETS.values()]


def select_dataset(articles: Sequence[ContentItem], name: str) -> list[ContentItem]:
    """Filter then truncate the demo articles for a named dataset.

    Raises:
        KeyError: unknown dataset name.
    """
    dataset = DATASETS[name]
    return [a for a in articles if dataset.predicate(a)][: dataset.limit]


def build_playground(
    articles: Sequence[ContentItem],
    manifest: TemplatesManifest,
    *,
    dataset: str = DEFAULT_DATASET,
    template_id: str = DEFAULT_TEMPLATE_ID,
    limit: int = 3,
    now: datetime | None = None,
    window_hours: int = DEFAULT_TIME_SENSITIVE_HOURS,
) -> PlaygroundView:
    """Assemble analysis, top recommendations and a preview for one dataset/template pair."""
    items = select_dataset(articles, dataset)
    analysis = analyze_content(items, now=now, window_hours=window_hours)

    recommendations: list[RecommendationRead] = []
    if items:
        recommendations = [
            RecommendationRead.from_recommendation(rec)
            for rec in recommend_templates(items, manifest, limit=limit, analysis=analysis)
        ]

    template = next((t for t in manifest.templates if t.id == template_id), None)
    preview: RenderedBlock | None = None
    preview_error: str | None = None
    if template is not None:
        try:
            preview = renderer_registry.render_items(template, items)
        except RenderContractError as exc:
            preview_error = str(exc)

    return PlaygroundView(
        dataset=dataset,
        items=items,
        analysis=analysis,
        recommendations=recommendations,
        template=template,
        preview=preview,
        preview_error=preview_error,
    )
