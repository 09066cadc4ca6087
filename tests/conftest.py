"""Shared fixtures: bundled manifest, demo articles, API client."""

import pytest
from fastapi.testclient import TestClient

from sabq.config import FIXTURES_DIR, Settings
from sabq.main import create_app
from sabq.services.playground import load_demo_articles
from sabq.services.template_manifest import load_manifest


@pytest.fixture
def manifest():
    return load_manifest(FIXTURES_DIR / "templates_manifest.json")


@pytest.fixture
def demo_articles():
    return load_demo_articles(FIXTURES_DIR / "demo_articles.json")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        manifest_path=str(FIXTURES_DIR / "templates_manifest.json"),
        manifest_url="",
        demo_articles_path=str(FIXTURES_DIR / "demo_articles.json"),
        recommendation_default_limit=5,
        playground_recommendation_limit=3,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
