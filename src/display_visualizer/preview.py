from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from PIL import Image

from display_visualizer.assembly.classify import classify
from display_visualizer.assembly.layout import RenderedCreative, layout_creative
from display_visualizer.assembly.render import rasterize, to_png_bytes
from display_visualizer.catalog import PRIMARY_SIZE, SIZE_CATALOG, SizeFamily, TargetSize, slugify
from display_visualizer.config import settings
from display_visualizer.drag import DragController
from display_visualizer.state import CreativeState, StateSnapshot

logger = logging.getLogger(__name__)

Rasterizer = Callable[[RenderedCreative, int], Image.Image]

EXPORT_FAILED_MESSAGE = "Could not export PNG. Check the server log for details."


@dataclass(frozen=True)
class ExportOptions:
    cache_bust: bool = settings.export_cache_bust
    pixel_ratio: int = settings.export_pixel_ratio


@dataclass(frozen=True)
class ExportResult:
    filename: str
    png: bytes
    options: ExportOptions


class Notifier:
    """
    User-facing alert channel. The page shows pending alerts until dismissed.
    """

    def __init__(self) -> None:
        self._alerts: list[str] = []

    def alert(self, message: str) -> None:
        self._alerts.append(message)

    @property
    def pending(self) -> list[str]:
        return list(self._alerts)

    def dismiss(self) -> None:
        self._alerts.clear()


class PreviewInstance:
    def __init__(
        self,
        size: TargetSize,
        state: CreativeState,
        interactive: bool = False,
        notifier: Notifier | None = None,
        rasterizer: Rasterizer = rasterize,
    ) -> None:
        self.size = size
        self.state = state
        self.interactive = interactive
        self.notifier = notifier or Notifier()
        self.rasterizer = rasterizer

    @property
    def label(self) -> str:
        return self.size.label

    @property
    def slug(self) -> str:
        return self.size.slug

    def render(self, snapshot: StateSnapshot | None = None) -> RenderedCreative:
        snap = snapshot or self.state.snapshot()
        c = classify(self.size.width, self.size.height)
        return layout_creative(self.size.size, c.layout_class, c.micro, snap.content, snap.transform)

    def render_png(self, pixel_ratio: int = 1, snapshot: StateSnapshot | None = None) -> bytes:
        return to_png_bytes(self.rasterizer(self.render(snapshot), pixel_ratio))

    def export_filename(self) -> str:
        return f"{slugify(self.label)}-{self.size.width}x{self.size.height}.png"

    async def export(self, options: ExportOptions | None = None) -> ExportResult | None:
        """
        Rasterize this preview for download.

        The state is captured when the export starts, so later edits do not
        leak into a running export. Failures are logged and reported through
        the notifier; they never propagate to the caller.
        """
        options = options or ExportOptions()
        snap = self.state.snapshot()
        try:
            png = await asyncio.to_thread(self.render_png, options.pixel_ratio, snap)
        except Exception:
            logger.exception("Download failed for %s", self.export_filename())
            self.notifier.alert(EXPORT_FAILED_MESSAGE)
            return None
        return ExportResult(filename=self.export_filename(), png=png, options=options)


class PreviewBoard:
    """
    All previews of the page, bound to the same live state.

    Exactly one preview (the primary size) is interactive and owns the drag
    controller. Preview PNGs are cached until the state changes.
    """

    def __init__(
        self,
        state: CreativeState,
        sizes: tuple[TargetSize, ...] = SIZE_CATALOG,
        primary: TargetSize | None = PRIMARY_SIZE,
        notifier: Notifier | None = None,
        rasterizer: Rasterizer = rasterize,
    ) -> None:
        self.state = state
        self.notifier = notifier or Notifier()
        self.previews: dict[str, PreviewInstance] = {}
        for size in sizes:
            self.previews[size.slug] = PreviewInstance(
                size,
                state,
                interactive=(size == primary),
                notifier=self.notifier,
                rasterizer=rasterizer,
            )
        self.primary = next((p for p in self.previews.values() if p.interactive), None)
        self.drag = DragController(self.primary, state) if self.primary else None
        self._png_cache: dict[str, tuple[int, bytes]] = {}
        self._unsubscribe = state.subscribe(self._on_change)

    def get(self, slug: str) -> PreviewInstance | None:
        return self.previews.get(slug)

    def by_family(self) -> dict[SizeFamily, list[PreviewInstance]]:
        grouped: dict[SizeFamily, list[PreviewInstance]] = {}
        for preview in self.previews.values():
            grouped.setdefault(preview.size.family, []).append(preview)
        return grouped

    def preview_png(self, slug: str) -> bytes:
        snap = self.state.snapshot()
        cached = self._png_cache.get(slug)
        if cached is not None and cached[0] == snap.version:
            return cached[1]
        png = self.previews[slug].render_png(pixel_ratio=1, snapshot=snap)
        # A render that raced a mutation belongs to an old version; never cache it.
        if snap.version == self.state.version:
            self._png_cache[slug] = (snap.version, png)
        return png

    def close(self) -> None:
        self._unsubscribe()
        self._png_cache.clear()

    def _on_change(self, snapshot: StateSnapshot) -> None:
        self._png_cache.clear()
