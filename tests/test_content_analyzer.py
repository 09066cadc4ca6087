"""Tests for content analysis signals and the content item schema."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from sabq.schemas.content import ContentItem, NewsType
from sabq.schemas.recommendation import ContentAnalysis
from sabq.services.content_analyzer import analyze_content

# ── Helper ─────────────────────────────────────────────────────────


def _make_item(
    item_id: str = "a-1",
    *,
    image: str | None = None,
    video_url: str | None = None,
    category_id: str | None = "local",
    news_type: NewsType = NewsType.REGULAR,
    excerpt: str | None = None,
    published_at: datetime | None = None,
) -> ContentItem:
    return ContentItem(
        id=item_id,
        title=f"Article {item_id}",
        image=image,
        video_url=video_url,
        category_id=category_id,
        news_type=news_type,
        excerpt=excerpt,
        published_at=published_at,
    )


# ── ContentItem schema ────────────────────────────────────────────


class TestContentItem:
    def test_defaults(self):
        item = ContentItem(id="1", title="T")
        assert item.news_type == NewsType.REGULAR
        assert item.image is None
        assert item.category_id is None
        assert item.views == 0
        assert item.comments == 0

    def test_accepts_cms_camel_case(self):
        item = ContentItem.model_validate({
            "id": "a-9",
            "title": "عاجل",
            "imageRef": "/img.jpg",
            "videoUrl": "/v.mp4",
            "categoryId": "sports",
            "newsType": "breaking",
            "publishedAt": "2025-11-02T08:15:00Z",
        })
        assert item.image == "/img.jpg"
        assert item.video_url == "/v.mp4"
        assert item.category_id == "sports"
        assert item.news_type == NewsType.BREAKING
        assert item.published_at == datetime(2025, 11, 2, 8, 15, tzinfo=UTC)

    def test_flattens_nested_category(self):
        item = ContentItem.model_validate({"id": "1", "title": "T", "category": {"id": "economy", "name": "اقتصاد"}})
        assert item.category_id == "economy"

    def test_integer_ids_coerced(self):
        item = ContentItem.model_validate({"id": 42, "title": "T", "category": {"id": 7}})
        assert item.id == "42"
        assert item.category_id == "7"

    def test_missing_title_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            ContentItem.model_validate({"id": "1"})
        assert exc_info.value.errors()[0]["loc"] == ("title",)

    def test_unknown_news_type_rejected(self):
        with pytest.raises(ValidationError):
            ContentItem(id="1", title="T", news_type="rumour")

    def test_is_immutable(self):
        item = ContentItem(id="1", title="T")
        with pytest.raises(ValidationError):
            item.title = "changed"

    def test_blank_media_is_absent(self):
        item = ContentItem(id="1", title="T", image="   ", video_url="")
        assert item.has_image is False
        assert item.has_video is False


# ── analyze_content ───────────────────────────────────────────────


class TestAnalyzeContent:
    def test_empty_input(self):
        analysis = analyze_content([])
        assert analysis.item_count == 0
        assert analysis.has_images is False
        assert analysis.has_video is False
        assert analysis.has_breaking is False
        assert analysis.unique_categories == 0
        assert analysis.has_featured is False
        assert analysis.avg_excerpt_length == 0.0
        assert analysis.is_time_sensitive is False

    def test_empty_input_matches_neutral_analysis(self):
        assert analyze_content([]) == ContentAnalysis(
            item_count=0,
            has_images=False,
            has_video=False,
            has_breaking=False,
            unique_categories=0,
        )

    def test_category_counting_excludes_missing(self):
        items = [
            _make_item("1", category_id="A"),
            _make_item("2", category_id="A"),
            _make_item("3", category_id="B"),
            _make_item("4", category_id=None),
            _make_item("5", category_id="C"),
        ]
        assert analyze_content(items).unique_categories == 3

    def test_media_flags(self):
        items = [_make_item("1"), _make_item("2", image="/a.jpg")]
        analysis = analyze_content(items)
        assert analysis.has_images is True
        assert analysis.has_video is False

        analysis = analyze_content([_make_item("1", video_url="/v.mp4")])
        assert analysis.has_video is True
        assert analysis.has_images is False

    def test_breaking_and_featured(self):
        items = [_make_item("1", news_type=NewsType.BREAKING), _make_item("2", news_type=NewsType.FEATURED)]
        analysis = analyze_content(items)
        assert analysis.has_breaking is True
        assert analysis.has_featured is True

    def test_breaking_is_time_sensitive(self):
        analysis = analyze_content([_make_item("1", news_type=NewsType.BREAKING)])
        assert analysis.is_time_sensitive is True

    def test_avg_excerpt_length_counts_missing_as_zero(self):
        items = [_make_item("1", excerpt="x" * 100), _make_item("2", excerpt=None)]
        assert analyze_content(items).avg_excerpt_length == pytest.approx(50.0)

    def test_item_count(self):
        items = [_make_item(str(i)) for i in range(7)]
        assert analyze_content(items).item_count == 7

    def test_does_not_mutate_input(self):
        items = [_make_item("1", image="/a.jpg"), _make_item("2")]
        snapshot = [item.model_dump() for item in items]
        analyze_content(items)
        assert [item.model_dump() for item in items] == snapshot


class TestTimeSensitivity:
    NOW = datetime(2025, 11, 2, 12, 0, tzinfo=UTC)

    def test_ignores_recency_without_now(self):
        items = [_make_item("1", published_at=self.NOW - timedelta(minutes=5))]
        assert analyze_content(items).is_time_sensitive is False

    def test_recent_item_within_window(self):
        items = [_make_item("1", published_at=self.NOW - timedelta(hours=2))]
        assert analyze_content(items, now=self.NOW).is_time_sensitive is True

    def test_old_item_outside_window(self):
        items = [_make_item("1", published_at=self.NOW - timedelta(hours=7))]
        assert analyze_content(items, now=self.NOW).is_time_sensitive is False

    def test_custom_window(self):
        items = [_make_item("1", published_at=self.NOW - timedelta(hours=7))]
        assert analyze_content(items, now=self.NOW, window_hours=12).is_time_sensitive is True

    def test_naive_datetimes_treated_as_utc(self):
        naive_now = datetime(2025, 11, 2, 12, 0)
        items = [_make_item("1", published_at=datetime(2025, 11, 2, 10, 0))]
        assert analyze_content(items, now=naive_now).is_time_sensitive is True

    def test_future_publication_not_recent(self):
        items = [_make_item("1", published_at=self.NOW + timedelta(hours=1))]
        assert analyze_content(items, now=self.NOW).is_time_sensitive is False
