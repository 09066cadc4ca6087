"""Pydantic schemas for the recommendation engine and API request/response validation."""

from sabq.schemas.content import ContentItem, NewsType
from sabq.schemas.template import (
    ContentTag,
    TemplateA11y,
    TemplateBehaviors,
    TemplateDescriptor,
    TemplateKind,
    TemplatePerformance,
    TemplateScoreHints,
    TemplatesManifest,
    TemplateStyles,
)
from sabq.schemas.recommendation import (
    ContentAnalysis,
    Recommendation,
    RecommendationRead,
    UserPreferences,
)

__all__ = [
    "ContentItem",
    "NewsType",
    "ContentTag",
    "TemplateA11y",
    "TemplateBehaviors",
    "TemplateDescriptor",
    "TemplateKind",
    "TemplatePerformance",
    "TemplateScoreHints",
    "TemplatesManifest",
    "TemplateStyles",
    "ContentAnalysis",
    "Recommendation",
    "RecommendationRead",
    "UserPreferences",
]
