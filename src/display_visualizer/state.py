from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable

from display_visualizer.creative import (
    CreativeContent,
    ImageTransform,
    ImageVariant,
    Offset,
    clamp_scale,
    normalize_color,
)
from display_visualizer.storage import Preset

logger = logging.getLogger(__name__)

Listener = Callable[["StateSnapshot"], None]


@dataclass(frozen=True)
class StateSnapshot:
    content: CreativeContent
    transform: ImageTransform
    version: int


class CreativeState:
    """
    The single live creative: copy, design, image variants and image transform.

    Previews never keep their own copy; they read `snapshot()` each time they
    render. Every mutation bumps `version` and notifies subscribers
    synchronously, in subscription order.
    """

    def __init__(self, content: CreativeContent | None = None, transform: ImageTransform | None = None) -> None:
        self._content = content or CreativeContent()
        self._transform = transform or ImageTransform()
        self._images: list[ImageVariant] = []
        self._active_index = 0
        self._version = 0
        self._listeners: list[Listener] = []

    @property
    def content(self) -> CreativeContent:
        return self._content

    @property
    def transform(self) -> ImageTransform:
        return self._transform

    @property
    def version(self) -> int:
        return self._version

    @property
    def images(self) -> tuple[ImageVariant, ...]:
        return tuple(self._images)

    @property
    def active_index(self) -> int:
        return self._active_index

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(content=self._content, transform=self._transform, version=self._version)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Copy / design

    def update_copy(
        self,
        headline: str | None = None,
        subhead: str | None = None,
        cta_label: str | None = None,
    ) -> None:
        changes = {}
        if headline is not None:
            changes["headline"] = headline
        if subhead is not None:
            changes["subhead"] = subhead
        if cta_label is not None:
            changes["cta_label"] = cta_label
        self._set(content=replace(self._content, **changes))

    def set_accent_color(self, color: str) -> None:
        self._set(content=replace(self._content, accent_color=normalize_color(color)))

    def set_dark_theme(self, dark: bool) -> None:
        self._set(content=replace(self._content, dark_theme=bool(dark)))

    def toggle_theme(self) -> None:
        self.set_dark_theme(not self._content.dark_theme)

    # Transform

    def set_scale(self, scale: float) -> float:
        clamped = clamp_scale(scale)
        if clamped != scale:
            logger.debug("scale %s clamped to %s", scale, clamped)
        self._set(transform=replace(self._transform, scale=clamped))
        return clamped

    def set_offset(self, offset: Offset) -> None:
        if not (math.isfinite(offset.x) and math.isfinite(offset.y)):
            raise ValueError(f"offset must be finite, got {offset}")
        self._set(transform=replace(self._transform, offset=offset))

    # Images

    def add_image(self, variant: ImageVariant) -> int:
        self._images.append(variant)
        self._active_index = len(self._images) - 1
        self._set(content=replace(self._content, image=variant))
        return self._active_index

    def select_image(self, index: int) -> None:
        if index < 0 or index >= len(self._images):
            raise IndexError(f"no image variant at index {index}")
        self._active_index = index
        self._set(content=replace(self._content, image=self._images[index]))

    # Presets

    def apply_preset(self, preset: Preset) -> None:
        """
        Restore copy, design and transform from a preset. The active image is
        not part of a preset and stays as it is.
        """
        content = replace(
            self._content,
            headline=preset.headline,
            subhead=preset.subhead,
            cta_label=preset.cta_label,
            accent_color=normalize_color(preset.accent_color),
            dark_theme=preset.dark_theme,
        )
        transform = ImageTransform(
            scale=clamp_scale(preset.image_scale),
            offset=Offset(preset.image_offset.get("x", 0.0), preset.image_offset.get("y", 0.0)),
        )
        self._set(content=content, transform=transform)

    def _set(self, content: CreativeContent | None = None, transform: ImageTransform | None = None) -> None:
        if content is not None:
            self._content = content
        if transform is not None:
            self._transform = transform
        self._version += 1
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
