"""Content item schemas — article snapshots read from the CMS."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class NewsType(StrEnum):
    """Editorial classification of an article."""

    BREAKING = "breaking"
    FEATURED = "featured"
    REGULAR = "regular"


class ContentItem(BaseModel):
    """Read-only snapshot of one article considered for a publishing slot.

    Accepts both snake_case and the camelCase keys emitted by the CMS
    (``imageRef``/``image``, ``videoUrl``, ``categoryId``, ``newsType``...).
    A nested ``category`` object is flattened into ``category_id``.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,  # CMS ids are often integers
    )

    id: str
    title: str
    excerpt: str | None = None
    image: str | None = Field(default=None, validation_alias=AliasChoices("image", "imageRef", "image_ref"))
    video_url: str | None = Field(default=None, validation_alias=AliasChoices("video_url", "videoUrl", "videoRef"))
    category_id: str | None = Field(default=None, validation_alias=AliasChoices("category_id", "categoryId"))
    news_type: NewsType = Field(default=NewsType.REGULAR, validation_alias=AliasChoices("news_type", "newsType"))
    published_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("published_at", "publishedAt")
    )
    views: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _flatten_category(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        category = data.get("category")
        if isinstance(category, dict) and "category_id" not in data and "categoryId" not in data:
            data = {**data, "category_id": category.get("id")}
        return data

    @property
    def has_image(self) -> bool:
        return bool(self.image and self.image.strip())

    @property
    def has_video(self) -> bool:
        return bool(self.video_url and self.video_url.strip())
