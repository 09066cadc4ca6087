"""Tests for the HTTP surface: templates, recommendations, render preview, playground."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from sabq.main import create_app

# ── Helpers ─────────────────────────────────────────────────────────


def _item(item_id: str, **extra) -> dict:
    return {"id": item_id, "title": f"خبر {item_id}", **extra}


def _scenario_items() -> list[dict]:
    return [
        _item("1", imageRef="/1.jpg", newsType="breaking", category={"id": "politics"}),
        _item("2", imageRef="/2.jpg", category={"id": "politics"}),
        _item("3", imageRef="/3.jpg", category={"id": "economy"}),
        _item("4", category={"id": "economy"}),
        _item("5", category={"id": "politics"}),
    ]


# ── App basics ───────────────────────────────────────────────────────


class TestApp:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_request_id_propagated(self, client):
        resp = client.get("/health", headers={"x-request-id": "req-123", "x-tenant-id": "sabq"})
        assert resp.headers["x-request-id"] == "req-123"

    def test_request_id_generated(self, client):
        resp = client.get("/health")
        assert resp.headers["x-request-id"]


# ── Templates ────────────────────────────────────────────────────────


class TestTemplateEndpoints:
    def test_list(self, client):
        resp = client.get("/api/v1/templates")
        assert resp.status_code == 200
        body = resp.json()
        assert len(body) == 12
        assert body[0]["id"] == "hero.split"
        assert body[0]["bestFor"] == ["breaking", "single-item", "time-sensitive"]

    def test_list_by_kind(self, client):
        resp = client.get("/api/v1/templates", params={"kind": "hero"})
        assert [t["id"] for t in resp.json()] == ["hero.split", "hero.fullbleed"]

    def test_get(self, client):
        resp = client.get("/api/v1/templates/grid.gallery")
        assert resp.status_code == 200
        assert resp.json()["performance"]["maxItems"] == 12

    def test_manifest_keys(self, client):
        body = client.get("/api/v1/templates/hero.split").json()
        assert "a11y" in body
        assert "a11Y" not in body
        assert body["a11y"]["minContrast"] >= 4.5
        assert body["scoreHints"] == {
            "minItems": None,
            "idealItems": None,
            "requiresImage": False,
            "requiresExcerpt": False,
        }

    def test_get_missing(self, client):
        resp = client.get("/api/v1/templates/nope")
        assert resp.status_code == 404


class TestAnalyzeEndpoint:
    def test_empty(self, client):
        resp = client.post("/api/v1/templates/analyze", json={"items": []})
        assert resp.status_code == 200
        body = resp.json()
        assert body["item_count"] == 0
        assert body["has_images"] is False
        assert body["has_video"] is False
        assert body["has_breaking"] is False
        assert body["unique_categories"] == 0

    def test_scenario(self, client):
        resp = client.post("/api/v1/templates/analyze", json={"items": _scenario_items()})
        body = resp.json()
        assert body["item_count"] == 5
        assert body["has_images"] is True
        assert body["has_breaking"] is True
        assert body["unique_categories"] == 2

    def test_invalid_item(self, client):
        resp = client.post("/api/v1/templates/analyze", json={"items": [{"id": "1"}]})
        assert resp.status_code == 422


class TestRecommendEndpoint:
    def test_ranked(self, client):
        resp = client.post("/api/v1/templates/recommend", json={"items": _scenario_items(), "limit": 3})
        assert resp.status_code == 200
        body = resp.json()
        assert body["fallback"] is False
        assert body["analysis"]["item_count"] == 5
        recs = body["recommendations"]
        assert len(recs) == 3
        assert recs[0]["template_id"] == "timeline.live"
        assert recs[0]["score"] == 70.0
        assert "matches breaking-news content" in recs[0]["reasoning"]
        scores = [r["score"] for r in recs]
        assert scores == sorted(scores, reverse=True)

    def test_default_limit_from_settings(self, client):
        resp = client.post("/api/v1/templates/recommend", json={"items": _scenario_items()})
        assert len(resp.json()["recommendations"]) == 5

    def test_kind_filter(self, client):
        resp = client.post(
            "/api/v1/templates/recommend",
            json={"items": _scenario_items(), "kind": "grid", "limit": 10},
        )
        assert [r["template_id"] for r in resp.json()["recommendations"]] == ["grid.gallery", "grid.cards"]

    def test_negative_limit_rejected(self, client):
        resp = client.post("/api/v1/templates/recommend", json={"items": [], "limit": -1})
        assert resp.status_code == 422

    def test_fallback_on_scoring_failure(self, client):
        with patch("sabq.api.v1.templates.recommend_templates", side_effect=RuntimeError("boom")):
            resp = client.post("/api/v1/templates/recommend", json={"items": _scenario_items(), "limit": 3})
        assert resp.status_code == 200
        body = resp.json()
        assert body["fallback"] is True
        assert [r["template_id"] for r in body["recommendations"]] == [
            "hero.split",
            "hero.fullbleed",
            "spotlight.card",
        ]
        assert all(r["score"] is None for r in body["recommendations"])


class TestAutoSelectEndpoint:
    def test_section_with_few_items(self, client):
        items = [_item(str(i), category={"id": "local"}) for i in range(3)]
        resp = client.post("/api/v1/templates/auto-select", json={"items": items, "block_type": "section"})
        assert resp.status_code == 200
        assert resp.json() == {"block_type": "section", "template_id": "list.editorial"}

    def test_unknown_block_type(self, client):
        resp = client.post("/api/v1/templates/auto-select", json={"items": [], "block_type": "footer"})
        assert resp.status_code == 422


class TestRenderEndpoint:
    def test_hero_single_item(self, client):
        resp = client.post("/api/v1/templates/hero.split/render", json={"items": [_item("1", imageRef="/1.jpg")]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["template_id"] == "hero.split"
        assert body["slots"][0]["role"] == "lead"
        assert body["slots"][0]["image"] == "/1.jpg"

    def test_hero_with_collection_rejected(self, client):
        resp = client.post("/api/v1/templates/hero.split/render", json={"items": _scenario_items()})
        assert resp.status_code == 422
        assert "exactly one item" in resp.json()["detail"]

    def test_grid(self, client):
        resp = client.post("/api/v1/templates/grid.gallery/render", json={"items": _scenario_items()})
        assert resp.status_code == 200
        assert resp.json()["columns"] == 3
        assert len(resp.json()["slots"]) == 5

    def test_missing_template(self, client):
        resp = client.post("/api/v1/templates/nope/render", json={"items": []})
        assert resp.status_code == 404


class TestPlaygroundEndpoints:
    def test_datasets(self, client):
        resp = client.get("/api/v1/playground/datasets")
        assert [d["name"] for d in resp.json()] == ["breaking-news", "featured", "mixed", "single", "many"]

    def test_default_view(self, client):
        resp = client.get("/api/v1/playground")
        assert resp.status_code == 200
        body = resp.json()
        assert body["dataset"] == "mixed"
        assert len(body["items"]) == 8
        assert len(body["recommendations"]) == 3
        assert body["preview"] is None
        assert body["preview_error"]

    def test_single_hero(self, client):
        resp = client.get("/api/v1/playground", params={"dataset": "single", "template_id": "hero.split"})
        body = resp.json()
        assert body["recommendations"][0]["template_id"] == "hero.split"
        assert body["preview"]["slots"][0]["item_id"] == "a-01"

    def test_unknown_dataset(self, client):
        resp = client.get("/api/v1/playground", params={"dataset": "archive"})
        assert resp.status_code == 404

    def test_unknown_template(self, client):
        resp = client.get("/api/v1/playground", params={"template_id": "nope"})
        assert resp.status_code == 404

    def test_window_from_settings(self, settings):
        wide = settings.model_copy(update={"time_sensitive_window_hours": 1_000_000})
        with TestClient(create_app(wide)) as client:
            view = client.get("/api/v1/playground", params={"dataset": "featured"}).json()
            analysis = client.post("/api/v1/templates/analyze", json={"items": view["items"]}).json()
        assert view["analysis"]["is_time_sensitive"] is True
        assert analysis["is_time_sensitive"] is True
