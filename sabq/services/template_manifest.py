"""Template manifest loading and lookup.

The manifest is versioned content configuration: a bundled JSON fixture or
a document served by the configuration store. It is loaded once at startup
and never mutated afterwards.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from sabq.core.logging import get_logger
from sabq.schemas.template import TemplateDescriptor, TemplateKind, TemplatesManifest

logger = get_logger(__name__)


class ManifestError(Exception):
    """Manifest could not be read, fetched or validated."""


def parse_manifest(data: Any) -> TemplatesManifest:
    """Validate a manifest document.

    Accepts either ``{"version": ..., "templates": [...]}`` or a bare list of
    template records.
    """
    if isinstance(data, list):
        data = {"templates": data}
    try:
        return TemplatesManifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Invalid template manifest: {exc}") from exc


def load_manifest(path: str | Path) -> TemplatesManifest:
    """Load a manifest from a JSON file on disk."""
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise ManifestError(f"Manifest not found: {manifest_path}")

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Manifest is not valid JSON: {manifest_path}") from exc

    manifest = parse_manifest(data)
    logger.info(
        "manifest_loaded",
        source="file",
        path=str(manifest_path),
        version=manifest.version,
        templates=len(manifest.templates),
    )
    return manifest


async def fetch_manifest(
    url: str,
    *,
    timeout: float = 5.0,
    client: httpx.AsyncClient | None = None,
) -> TemplatesManifest:
    """Fetch a manifest from a remote configuration endpoint."""
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                resp = await own_client.get(url, headers={"Accept": "application/json"})
        else:
            resp = await client.get(url, headers={"Accept": "application/json"})
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPError as exc:
        raise ManifestError(f"Failed to fetch manifest from {url}: {exc}") from exc
    except ValueError as exc:
        raise ManifestError(f"Manifest response from {url} is not valid JSON") from exc

    manifest = parse_manifest(data)
    logger.info(
        "manifest_loaded",
        source="remote",
        url=url,
        version=manifest.version,
        templates=len(manifest.templates),
    )
    return manifest


class TemplateRegistry:
    """Read-only lookup over a loaded manifest, in declared order."""

    def __init__(self, manifest: TemplatesManifest) -> None:
        self.manifest = manifest
        self._by_id: dict[str, TemplateDescriptor] = {t.id: t for t in manifest.templates}

    def get(self, template_id: str) -> TemplateDescriptor | None:
        return self._by_id.get(template_id)

    def require(self, template_id: str) -> TemplateDescriptor:
        template = self._by_id.get(template_id)
        if template is None:
            raise KeyError(template_id)
        return template

    def by_kind(self, kind: TemplateKind) -> list[TemplateDescriptor]:
        return [t for t in self.manifest.templates if t.kind == kind]

    def all(self) -> list[TemplateDescriptor]:
        return list(self.manifest.templates)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[TemplateDescriptor]:
        return iter(self.manifest.templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._by_id
