"""Template manifest schemas — presentation templates and their declared capabilities."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ── Enums ──


class TemplateKind(StrEnum):
    """Structural category of a template."""

    HERO = "hero"
    SPOTLIGHT = "spotlight"
    GRID = "grid"
    LIST = "list"
    CAROUSEL = "carousel"
    TICKER = "ticker"
    TIMELINE = "timeline"
    MOSAIC = "mosaic"

    @property
    def is_single_item(self) -> bool:
        """Hero and spotlight templates render exactly one item."""
        return self in (TemplateKind.HERO, TemplateKind.SPOTLIGHT)


class ContentTag(StrEnum):
    """Content shapes a template can declare itself best suited for."""

    BREAKING = "breaking"
    FEATURED = "featured"
    GALLERY = "gallery"
    VIDEO = "video"
    MANY_ITEMS = "many-items"
    FEW_ITEMS = "few-items"
    SINGLE_ITEM = "single-item"
    DIVERSE = "diverse"
    TIME_SENSITIVE = "time-sensitive"
    LONG_FORM = "long-form"


# ── Capability profile ──


class _ManifestModel(BaseModel):
    """Immutable manifest record; accepts camelCase keys from remote manifests."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TemplateBehaviors(_ManifestModel):
    pagination: Literal["none", "load-more", "infinite", "paged"] = "none"
    animation: bool = False
    virtualize: bool = False


class TemplatePerformance(_ManifestModel):
    hydration: Literal["eager", "lazy", "idle", "visible"] = "eager"
    max_items: int | None = Field(default=None, ge=1)  # Advisory capacity


class TemplateStyles(_ManifestModel):
    density: Literal["compact", "cozy", "comfortable"] = "cozy"
    elevation: int = Field(default=0, ge=0, le=5)


class TemplateA11y(_ManifestModel):
    min_contrast: float = Field(default=4.5, ge=1.0)
    keyboard_nav: bool = True


class TemplateScoreHints(_ManifestModel):
    """Content requirements; unmet ones cost score."""

    min_items: int | None = Field(default=None, ge=1)
    ideal_items: int | None = Field(default=None, ge=1)
    requires_image: bool = False
    requires_excerpt: bool = False


# ── Template definition ──


class TemplateDescriptor(_ManifestModel):
    """One candidate presentation template as declared in the manifest."""

    id: str = Field(min_length=1)  # "hero.split", "grid.gallery"
    name: str = ""  # Human label, defaults to id
    kind: TemplateKind
    best_for: tuple[ContentTag, ...]
    behaviors: TemplateBehaviors
    performance: TemplatePerformance
    styles: TemplateStyles
    # to_camel would emit "a11Y"
    a11y: TemplateA11y = Field(alias="a11y")
    score_hints: TemplateScoreHints = Field(default_factory=TemplateScoreHints)

    @field_validator("best_for")
    @classmethod
    def _dedupe_tags(cls, tags: tuple[ContentTag, ...]) -> tuple[ContentTag, ...]:
        # A repeated tag must not score twice
        return tuple(dict.fromkeys(tags))

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": data.get("id", "")}
        return data


class TemplatesManifest(_ManifestModel):
    """Full set of available templates, in declared order."""

    version: str = "1"
    templates: tuple[TemplateDescriptor, ...] = ()

    @model_validator(mode="after")
    def _unique_ids(self) -> TemplatesManifest:
        seen: set[str] = set()
        for template in self.templates:
            if template.id in seen:
                raise ValueError(f"duplicate template id: {template.id}")
            seen.add(template.id)
        return self
