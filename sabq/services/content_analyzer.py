"""Content analysis: derive aggregate signals from a list of articles.

The analyzer is a pure function of its input. Recency only contributes to
``is_time_sensitive`` when the caller passes ``now`` explicitly, so the same
items always produce the same analysis.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from sabq.schemas.content import ContentItem, NewsType
from sabq.schemas.recommendation import ContentAnalysis

DEFAULT_TIME_SENSITIVE_HOURS = 6


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def _is_recent(item: ContentItem, now: datetime, window: timedelta) -> bool:
    if item.published_at is None:
        return False
    age = _as_utc(now) - _as_utc(item.published_at)
    return timedelta(0) <= age < window


def analyze_content(
    items: Sequence[ContentItem],
    *,
    now: datetime | None = None,
    window_hours: int = DEFAULT_TIME_SENSITIVE_HOURS,
) -> ContentAnalysis:
    """Compute the content signals used for template scoring.

    Args:
        items: Articles intended for one publishing slot. May be empty.
        now: Reference time for recency. ``None`` ignores publication time.
        window_hours: Age under which an article counts as time-sensitive.

    Returns:
        A ContentAnalysis. Empty input yields zero counts and all flags false.
    """
    item_count = len(items)
    has_breaking = any(item.news_type == NewsType.BREAKING for item in items)

    categories = {item.category_id for item in items if item.category_id}

    avg_excerpt_length = 0.0
    if item_count:
        avg_excerpt_length = sum(len(item.excerpt or "") for item in items) / item_count

    is_time_sensitive = has_breaking
    if not is_time_sensitive and now is not None:
        window = timedelta(hours=window_hours)
        is_time_sensitive = any(_is_recent(item, now, window) for item in items)

    return ContentAnalysis(
        item_count=item_count,
        has_images=any(item.has_image for item in items),
        has_video=any(item.has_video for item in items),
        has_breaking=has_breaking,
        unique_categories=len(categories),
        has_featured=any(item.news_type == NewsType.FEATURED for item in items),
        avg_excerpt_length=avg_excerpt_length,
        is_time_sensitive=is_time_sensitive,
    )
