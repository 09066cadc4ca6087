"""Template endpoints — manifest listing, content analysis, recommendations, render preview."""

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, status

from sabq.core.logging import get_logger
from sabq.deps import AppSettings, Renderers, Templates
from sabq.schemas.recommendation import (
    AnalyzeRequest,
    AutoSelectRequest,
    AutoSelectResponse,
    ContentAnalysis,
    RecommendationRead,
    RecommendRequest,
    RecommendResponse,
    RenderRequestBody,
)
from sabq.schemas.template import TemplateDescriptor, TemplateKind
from sabq.services.content_analyzer import analyze_content
from sabq.services.template_renderer import RenderContractError, RenderedBlock
from sabq.services.template_selector import (
    auto_select_template,
    fallback_order,
    recommend_templates,
)

logger = get_logger(__name__)

router = APIRouter()


def _ensure_template(templates: Templates, template_id: str) -> TemplateDescriptor:
    template = templates.get(template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template not found: {template_id}",
        )
    return template


@router.get("", response_model=list[TemplateDescriptor])
async def list_templates(
    templates: Templates,
    kind: TemplateKind | None = None,
) -> list[TemplateDescriptor]:
    """List manifest templates in declared order, optionally by kind."""
    if kind is not None:
        return templates.by_kind(kind)
    return templates.all()


@router.post("/analyze", response_model=ContentAnalysis)
async def analyze(
    data: AnalyzeRequest,
    settings: AppSettings,
) -> ContentAnalysis:
    """Derive content signals for a list of articles."""
    return analyze_content(
        data.items,
        now=datetime.now(UTC),
        window_hours=settings.time_sensitive_window_hours,
    )


@router.post("/recommend", response_model=RecommendResponse)
async def recommend(
    data: RecommendRequest,
    templates: Templates,
    settings: AppSettings,
) -> RecommendResponse:
    """Rank templates for the given articles.

    If scoring fails the manifest is returned in declared order without
    scores so the editor page still has something to offer.
    """
    analysis = analyze_content(
        data.items,
        now=datetime.now(UTC),
        window_hours=settings.time_sensitive_window_hours,
    )
    limit = data.limit if data.limit is not None else settings.recommendation_default_limit

    try:
        ranked = recommend_templates(
            data.items,
            templates.manifest,
            limit=limit,
            kind=data.kind,
            min_score=data.min_score,
            preferences=data.preferences,
            analysis=analysis,
        )
    except Exception as exc:
        logger.exception("recommendation_failed", error=str(exc), item_count=analysis.item_count)
        listing = fallback_order(templates.manifest)[:limit]
        return RecommendResponse(
            analysis=analysis,
            recommendations=[RecommendationRead.unscored(t) for t in listing],
            fallback=True,
        )

    logger.info(
        "templates_recommended",
        item_count=analysis.item_count,
        returned=len(ranked),
        top=ranked[0].template.id if ranked else None,
    )
    return RecommendResponse(
        analysis=analysis,
        recommendations=[RecommendationRead.from_recommendation(r) for r in ranked],
    )


@router.post("/auto-select", response_model=AutoSelectResponse)
async def auto_select(
    data: AutoSelectRequest,
    templates: Templates,
) -> AutoSelectResponse:
    """Pick a template for a smart block."""
    template_id = auto_select_template(data.items, templates.manifest, data.block_type)
    return AutoSelectResponse(block_type=data.block_type, template_id=template_id)


@router.get("/{template_id}", response_model=TemplateDescriptor)
async def get_template(
    template_id: str,
    templates: Templates,
) -> TemplateDescriptor:
    """Get one template descriptor."""
    return _ensure_template(templates, template_id)


@router.post("/{template_id}/render", response_model=RenderedBlock)
async def render_template(
    template_id: str,
    data: RenderRequestBody,
    templates: Templates,
    renderers: Renderers,
) -> RenderedBlock:
    """Build a render preview of the template with the given articles."""
    template = _ensure_template(templates, template_id)
    try:
        return renderers.render_items(template, data.items)
    except RenderContractError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(exc),
        ) from exc
