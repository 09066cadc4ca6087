"""Recommendation schemas — content analysis, scored templates, API payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from sabq.schemas.content import ContentItem
from sabq.schemas.template import TemplateDescriptor, TemplateKind


# ── Engine results ──


class ContentAnalysis(BaseModel):
    """Aggregate signals derived from one list of content items."""

    model_config = ConfigDict(frozen=True)

    item_count: int = Field(ge=0)
    has_images: bool
    has_video: bool
    has_breaking: bool
    unique_categories: int = Field(ge=0)
    has_featured: bool = False
    avg_excerpt_length: float = 0.0
    is_time_sensitive: bool = False


class Recommendation(BaseModel):
    """One scored template candidate with the reasons behind its score."""

    model_config = ConfigDict(frozen=True)

    template: TemplateDescriptor
    score: float = Field(ge=0, le=100)
    reasoning: tuple[str, ...] = ()


class UserPreferences(BaseModel):
    """Operator display preferences that nudge the ranking."""

    model_config = ConfigDict(frozen=True)

    density: Literal["compact", "cozy", "comfortable"] | None = None
    prefers_visual: bool = False


# ── API payloads ──


BlockType = Literal["hero", "section", "sidebar", "ticker", "spotlight"]


class AnalyzeRequest(BaseModel):
    items: list[ContentItem] = Field(default_factory=list)


class RecommendRequest(BaseModel):
    items: list[ContentItem] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=0)
    kind: TemplateKind | None = None
    min_score: float | None = Field(default=None, ge=0, le=100)
    preferences: UserPreferences | None = None


class RecommendationRead(BaseModel):
    """Flattened recommendation for display. ``score`` is null on fallback listings."""

    template_id: str
    name: str
    kind: TemplateKind
    score: float | None = None
    reasoning: list[str] = []

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> RecommendationRead:
        return cls(
            template_id=rec.template.id,
            name=rec.template.name,
            kind=rec.template.kind,
            score=rec.score,
            reasoning=list(rec.reasoning),
        )

    @classmethod
    def unscored(cls, template: TemplateDescriptor) -> RecommendationRead:
        return cls(template_id=template.id, name=template.name, kind=template.kind)


class RecommendResponse(BaseModel):
    analysis: ContentAnalysis
    recommendations: list[RecommendationRead]
    fallback: bool = False


class AutoSelectRequest(BaseModel):
    items: list[ContentItem] = Field(default_factory=list)
    block_type: BlockType


class AutoSelectResponse(BaseModel):
    block_type: BlockType
    template_id: str | None = None


class RenderRequestBody(BaseModel):
    items: list[ContentItem] = Field(default_factory=list)
