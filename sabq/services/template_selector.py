"""Template selection engine: score manifest templates against analyzed content.

Each content tag a template declares in ``best_for`` maps to one rule in
SIGNAL_RULES: a predicate over the ContentAnalysis, a weight, and a
reasoning string. Scores start at 0, rule weights and penalties are summed,
and the total is clamped to [0, 100]. A template may also declare
score_hints, content requirements that cost score when unmet.

Weights are regression-fixed; tests pin the resulting orders.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sabq.core.logging import get_logger
from sabq.schemas.content import ContentItem
from sabq.schemas.recommendation import (
    BlockType,
    ContentAnalysis,
    Recommendation,
    UserPreferences,
)
from sabq.schemas.template import ContentTag, TemplateDescriptor, TemplateKind, TemplatesManifest
from sabq.services.content_analyzer import DEFAULT_TIME_SENSITIVE_HOURS, analyze_content

logger = get_logger(__name__)

MAX_SCORE = 100.0
MIN_SCORE = 0.0

GALLERY_MIN_ITEMS = 3
MANY_ITEMS_THRESHOLD = 5
FEW_ITEMS_RANGE = (2, 4)
DIVERSE_MIN_CATEGORIES = 4  # strictly more than 3
LONG_FORM_MIN_EXCERPT = 100

SINGLE_ITEM_KIND_PENALTY = 100
CAPACITY_PENALTY = 20
MIN_ITEMS_PENALTY = 30
IDEAL_ITEMS_PENALTY_PER_ITEM = 2
IDEAL_ITEMS_TOLERANCE = 2
MISSING_IMAGE_PENALTY = 40
MISSING_EXCERPT_PENALTY = 25
MIN_EXCERPT_LENGTH = 50
VISUAL_PREFERENCE_BONUS = 10
DENSITY_PREFERENCE_BONUS = 5

DEFAULT_REASON = "compatible with the content"



# ── Rule table ──


@dataclass(frozen=True)
class SignalRule:
    """Bonus awarded when a template's tag matches a content signal."""

    predicate: Callable[[ContentAnalysis], bool]
    weight: int
    reason: str  # Formatted with the analysis fields

    def applies(self, analysis: ContentAnalysis) -> bool:
        return self.predicate(analysis)

    def explain(self, analysis: ContentAnalysis) -> str:
        return self.reason.format(**analysis.model_dump())


SIGNAL_RULES: dict[ContentTag, SignalRule] = {
    ContentTag.BREAKING: SignalRule(
        predicate=lambda a: a.has_breaking,
        weight=30,
        reason="matches breaking-news content",
    ),
    ContentTag.FEATURED: SignalRule(
        predicate=lambda a: a.has_featured,
        weight=20,
        reason="suits featured content",
    ),
    ContentTag.GALLERY: SignalRule(
        predicate=lambda a: a.has_images and a.item_count >= GALLERY_MIN_ITEMS,
        weight=25,
        reason="supports multiple images",
    ),
    ContentTag.VIDEO: SignalRule(
        predicate=lambda a: a.has_video,
        weight=25,
        reason="showcases video content",
    ),
    ContentTag.MANY_ITEMS: SignalRule(
        predicate=lambda a: a.item_count >= MANY_ITEMS_THRESHOLD,
        weight=20,
        reason="handles a large number of items ({item_count})",
    ),
    ContentTag.FEW_ITEMS: SignalRule(
        predicate=lambda a: FEW_ITEMS_RANGE[0] <= a.item_count <= FEW_ITEMS_RANGE[1],
        weight=20,
        reason="fits a short selection ({item_count})",
    ),
    ContentTag.SINGLE_ITEM: SignalRule(
        predicate=lambda a: a.item_count == 1,
        weight=30,
        reason="built for a single lead story",
    ),
    ContentTag.DIVERSE: SignalRule(
        predicate=lambda a: a.unique_categories >= DIVERSE_MIN_CATEGORIES,
        weight=15,
        reason="mixes several categories ({unique_categories})",
    ),
    ContentTag.TIME_SENSITIVE: SignalRule(
        predicate=lambda a: a.is_time_sensitive,
        weight=20,
        reason="highlights time-sensitive content",
    ),
    ContentTag.LONG_FORM: SignalRule(
        predicate=lambda a: a.avg_excerpt_length >= LONG_FORM_MIN_EXCERPT,
        weight=10,
        reason="leaves room for long excerpts",
    ),
}


# ── Scoring ──


def score_template(
    template: TemplateDescriptor,
    analysis: ContentAnalysis,
    preferences: UserPreferences | None = None,
) -> tuple[float, list[str]]:
    """Score one template against analyzed content.

    Returns (score clamped to [0, 100], reasoning in contribution order).
    """
    total = 0
    reasons: list[str] = []

    for tag in template.best_for:
        rule = SIGNAL_RULES[tag]
        if rule.applies(analysis):
            total += rule.weight
            reasons.append(rule.explain(analysis))

    if template.kind.is_single_item and analysis.item_count > 1:
        total -= SINGLE_ITEM_KIND_PENALTY
        reasons.append(f"renders a single item only ({analysis.item_count} given)")

    max_items = template.performance.max_items
    if max_items is not None and analysis.item_count > max_items:
        total -= CAPACITY_PENALTY
        reasons.append(f"exceeds capacity of {max_items} items")

    hints = template.score_hints
    if hints.min_items is not None and analysis.item_count < hints.min_items:
        total -= MIN_ITEMS_PENALTY
        reasons.append(f"needs at least {hints.min_items} items")
    if hints.ideal_items is not None:
        deviation = abs(analysis.item_count - hints.ideal_items)
        total -= deviation * IDEAL_ITEMS_PENALTY_PER_ITEM
        if deviation <= IDEAL_ITEMS_TOLERANCE:
            reasons.append(f"ideal item count ({analysis.item_count})")
    if hints.requires_image and not analysis.has_images:
        total -= MISSING_IMAGE_PENALTY
        reasons.append("requires images")
    if hints.requires_excerpt and analysis.avg_excerpt_length < MIN_EXCERPT_LENGTH:
        total -= MISSING_EXCERPT_PENALTY
        reasons.append("requires longer excerpts")

    if preferences is not None:
        visual = (
            hints.requires_image
            or ContentTag.GALLERY in template.best_for
            or ContentTag.VIDEO in template.best_for
        )
        if preferences.prefers_visual and visual and analysis.has_images:
            total += VISUAL_PREFERENCE_BONUS
            reasons.append("matches visual preference")
        if preferences.density is not None and preferences.density == template.styles.density:
            total += DENSITY_PREFERENCE_BONUS
            reasons.append("matches preferred density")

    return max(MIN_SCORE, min(MAX_SCORE, float(total))), reasons


def _coerce_templates(
    manifest: TemplatesManifest | Iterable[TemplateDescriptor | Mapping[str, Any]],
) -> list[TemplateDescriptor]:
    """Accept a manifest or raw records; raw records are validated (pydantic ValidationError)."""
    if isinstance(manifest, TemplatesManifest):
        return list(manifest.templates)
    return [
        t if isinstance(t, TemplateDescriptor) else TemplateDescriptor.model_validate(t)
        for t in manifest
    ]


def recommend_templates(
    items: Sequence[ContentItem],
    manifest: TemplatesManifest | Iterable[TemplateDescriptor | Mapping[str, Any]],
    *,
    limit: int | None = None,
    kind: TemplateKind | None = None,
    min_score: float | None = None,
    preferences: UserPreferences | None = None,
    analysis: ContentAnalysis | None = None,
    now: datetime | None = None,
    window_hours: int = DEFAULT_TIME_SENSITIVE_HOURS,
) -> list[Recommendation]:
    """Rank manifest templates for the given content.

    Every template is returned, highest score first. Equal scores keep
    manifest order. Optional filters:
        kind: only score templates of this kind.
        min_score: drop candidates scoring below this after scoring.
        limit: keep the top N after sorting.

    Raises:
        pydantic.ValidationError: a raw manifest record is missing a required field.
        ValueError: ``limit`` is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    templates = _coerce_templates(manifest)
    if analysis is None:
        analysis = analyze_content(items, now=now, window_hours=window_hours)

    if kind is not None:
        templates = [t for t in templates if t.kind == kind]

    scored: list[Recommendation] = []
    for template in templates:
        score, reasons = score_template(template, analysis, preferences)
        reasoning = tuple(reasons) or (DEFAULT_REASON,)
        scored.append(Recommendation(template=template, score=score, reasoning=reasoning))

    if min_score is not None:
        scored = [rec for rec in scored if rec.score >= min_score]

    # sorted() is stable, including with reverse=True
    ranked = sorted(scored, key=lambda rec: rec.score, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]

    logger.debug(
        "templates_scored",
        candidates=len(templates),
        returned=len(ranked),
        item_count=analysis.item_count,
        top=ranked[0].template.id if ranked else None,
    )
    return ranked


def select_best_template(
    items: Sequence[ContentItem],
    manifest: TemplatesManifest | Iterable[TemplateDescriptor | Mapping[str, Any]],
    **options: Any,
) -> Recommendation | None:
    """Return the top recommendation, or None when nothing qualifies."""
    options["limit"] = 1
    recommendations = recommend_templates(items, manifest, **options)
    return recommendations[0] if recommendations else None


# ── Smart block auto-selection ──

SECTION_LIST_MAX_ITEMS = 6


def block_kind(block_type: BlockType, item_count: int) -> TemplateKind:
    """Map a page block to the template kind it is filled with."""
    if block_type == "section":
        return TemplateKind.LIST if item_count <= SECTION_LIST_MAX_ITEMS else TemplateKind.GRID
    return {
        "hero": TemplateKind.HERO,
        "sidebar": TemplateKind.LIST,
        "ticker": TemplateKind.TICKER,
        "spotlight": TemplateKind.SPOTLIGHT,
    }[block_type]


def auto_select_template(
    items: Sequence[ContentItem],
    manifest: TemplatesManifest | Iterable[TemplateDescriptor | Mapping[str, Any]],
    block_type: BlockType,
) -> str | None:
    """Pick a template id for a smart block, or None if the manifest has no template of that kind."""
    kind = block_kind(block_type, len(items))
    best = select_best_template(items, manifest, kind=kind)
    return best.template.id if best else None


def fallback_order(
    manifest: TemplatesManifest | Iterable[TemplateDescriptor | Mapping[str, Any]],
) -> list[TemplateDescriptor]:
    """Manifest order with no scoring, for consumers that cannot rank."""
    return _coerce_templates(manifest)
