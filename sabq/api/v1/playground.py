"""Playground endpoints — operators try templates against demo datasets."""

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Query, status

from sabq.deps import AppSettings, DemoArticles, Templates
from sabq.services.playground import (
    DATASETS,
    DEFAULT_DATASET,
    DEFAULT_TEMPLATE_ID,
    DatasetInfo,
    PlaygroundView,
    build_playground,
    list_datasets,
)

router = APIRouter()


@router.get("/datasets", response_model=list[DatasetInfo])
async def get_datasets() -> list[DatasetInfo]:
    """Available demo datasets."""
    return list_datasets()


@router.get("", response_model=PlaygroundView)
async def get_playground(
    templates: Templates,
    articles: DemoArticles,
    settings: AppSettings,
    dataset: str = Query(DEFAULT_DATASET),
    template_id: str = Query(DEFAULT_TEMPLATE_ID),
) -> PlaygroundView:
    """Analysis, top recommendations and a preview for one dataset/template pair."""
    if dataset not in DATASETS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown dataset: {dataset}")
    if template_id not in templates:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Template not found: {template_id}")

    return build_playground(
        articles,
        templates.manifest,
        dataset=dataset,
        template_id=template_id,
        limit=settings.playground_recommendation_limit,
        now=datetime.now(UTC),
        window_hours=settings.time_sensitive_window_hours,
    )
