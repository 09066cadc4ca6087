"""Renderer dispatch: turn a template + content into a preview render plan.

A template's kind fixes the shape of its input. Hero and spotlight kinds
take a SingleItem, every other kind takes a Collection. The registry maps
each kind to a renderer that produces a RenderedBlock: an ordered list of
slots the presentation layer lays out.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from sabq.core.logging import get_logger
from sabq.schemas.content import ContentItem
from sabq.schemas.template import TemplateDescriptor, TemplateKind

logger = get_logger(__name__)


class RenderContractError(Exception):
    """Render request does not match the template's kind, or no renderer exists."""


# ── Render requests (tagged variants) ──


class SingleItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["single"] = "single"
    item: ContentItem


class Collection(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["collection"] = "collection"
    items: tuple[ContentItem, ...] = ()


RenderRequest = Annotated[SingleItem | Collection, Field(discriminator="mode")]


def build_render_request(
    template: TemplateDescriptor,
    items: Sequence[ContentItem],
) -> SingleItem | Collection:
    """Wrap items in the variant the template's kind consumes.

    Raises:
        RenderContractError: a single-item kind was given anything but one item.
    """
    if template.kind.is_single_item:
        if len(items) != 1:
            raise RenderContractError(
                f"Template {template.id!r} ({template.kind}) renders exactly one item, got {len(items)}"
            )
        return SingleItem(item=items[0])
    return Collection(items=tuple(items))


# ── Render plan ──


class RenderSlot(BaseModel):
    position: int
    role: str  # lead | spotlight | tile | row | slide | headline | entry
    item_id: str
    title: str
    image: str | None = None
    news_type: str


class RenderedBlock(BaseModel):
    template_id: str
    kind: TemplateKind
    columns: int = 1
    slots: list[RenderSlot] = []
    overflow: int = 0  # Items beyond the template's capacity
    pagination: str = "none"
    animated: bool = False


Renderer = Callable[[TemplateDescriptor, RenderRequest], RenderedBlock]

DENSITY_COLUMNS = {"compact": 4, "cozy": 3, "comfortable": 2}


def _slot(position: int, role: str, item: ContentItem, with_image: bool = True) -> RenderSlot:
    return RenderSlot(
        position=position,
        role=role,
        item_id=item.id,
        title=item.title,
        image=item.image if with_image and item.has_image else None,
        news_type=item.news_type.value,
    )


def _block(template: TemplateDescriptor, columns: int, slots: list[RenderSlot], overflow: int = 0) -> RenderedBlock:
    return RenderedBlock(
        template_id=template.id,
        kind=template.kind,
        columns=columns,
        slots=slots,
        overflow=overflow,
        pagination=template.behaviors.pagination,
        animated=template.behaviors.animation,
    )


def _visible(template: TemplateDescriptor, items: Sequence[ContentItem]) -> tuple[Sequence[ContentItem], int]:
    cap = template.performance.max_items
    if cap is None or len(items) <= cap:
        return items, 0
    return items[:cap], len(items) - cap


def _single_renderer(role: str) -> Renderer:
    def render(template: TemplateDescriptor, request: RenderRequest) -> RenderedBlock:
        if not isinstance(request, SingleItem):
            raise RenderContractError(f"Template {template.id!r} expects a single item")
        return _block(template, 1, [_slot(0, role, request.item)])

    return render


def _collection_renderer(role: str, *, columns: int | None = None, lead: bool = False,
                         with_images: bool = True) -> Renderer:
    def render(template: TemplateDescriptor, request: RenderRequest) -> RenderedBlock:
        if not isinstance(request, Collection):
            raise RenderContractError(f"Template {template.id!r} expects a collection")
        visible, overflow = _visible(template, request.items)
        slots = [
            _slot(i, "lead" if lead and i == 0 else role, item, with_images)
            for i, item in enumerate(visible)
        ]
        cols = columns if columns is not None else DENSITY_COLUMNS[template.styles.density]
        return _block(template, cols, slots, overflow)

    return render


# ── Registry ──


class RendererRegistry:
    """Kind → renderer dispatch table, populated at startup."""

    def __init__(self) -> None:
        self._renderers: dict[TemplateKind, Renderer] = {}

    def register(self, kind: TemplateKind, renderer: Renderer) -> None:
        self._renderers[kind] = renderer

    def renderer_for(self, template: TemplateDescriptor) -> Renderer:
        renderer = self._renderers.get(template.kind)
        if renderer is None:
            raise RenderContractError(f"No renderer registered for kind {template.kind!r}")
        return renderer

    def render(self, template: TemplateDescriptor, request: RenderRequest) -> RenderedBlock:
        block = self.renderer_for(template)(template, request)
        logger.debug("template_rendered", template_id=template.id, slots=len(block.slots))
        return block

    def render_items(self, template: TemplateDescriptor, items: Sequence[ContentItem]) -> RenderedBlock:
        return self.render(template, build_render_request(template, items))

    def kinds(self) -> list[TemplateKind]:
        return list(self._renderers)


def register_builtin_renderers(registry: RendererRegistry) -> RendererRegistry:
    registry.register(TemplateKind.HERO, _single_renderer("lead"))
    registry.register(TemplateKind.SPOTLIGHT, _single_renderer("spotlight"))
    registry.register(TemplateKind.GRID, _collection_renderer("tile"))
    registry.register(TemplateKind.MOSAIC, _collection_renderer("tile", lead=True))
    registry.register(TemplateKind.LIST, _collection_renderer("row", columns=1))
    registry.register(TemplateKind.CAROUSEL, _collection_renderer("slide", columns=1))
    registry.register(TemplateKind.TIMELINE, _collection_renderer("entry", columns=1))
    registry.register(TemplateKind.TICKER, _collection_renderer("headline", columns=1, with_images=False))
    return registry


renderer_registry = register_builtin_renderers(RendererRegistry())
