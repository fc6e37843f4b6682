from __future__ import annotations

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING

from display_visualizer.creative import Offset

if TYPE_CHECKING:
    from display_visualizer.preview import PreviewInstance
    from display_visualizer.state import CreativeState

logger = logging.getLogger(__name__)


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragController:
    """
    Pointer-driven repositioning of the creative inside one preview.

    Offsets are always measured from where the drag started, never
    accumulated per move, and are not clamped: the image may be dragged
    completely out of its region.
    """

    def __init__(self, preview: PreviewInstance, state: CreativeState) -> None:
        self.preview = preview
        self.state = state
        self.drag_state = DragState.IDLE
        self._pointer_start: Offset | None = None
        self._offset_start: Offset | None = None

    @property
    def enabled(self) -> bool:
        return self.preview.interactive

    @property
    def dragging(self) -> bool:
        return self.drag_state is DragState.DRAGGING

    def pointer_down(self, x: float, y: float) -> bool:
        if not self.enabled or self.state.content.image is None or not _finite(x, y):
            return False
        rendered = self.preview.render()
        if not rendered.image.contains(x, y):
            return False
        self._pointer_start = Offset(x, y)
        self._offset_start = self.state.transform.offset
        self.drag_state = DragState.DRAGGING
        logger.debug("drag start on %s at (%s, %s)", self.preview.label, x, y)
        return True

    def pointer_move(self, x: float, y: float) -> Offset | None:
        if not self.dragging or self._pointer_start is None or self._offset_start is None:
            return None
        if not _finite(x, y):
            logger.debug("ignoring non-finite pointer position (%s, %s)", x, y)
            return None
        offset = self._offset_start + (Offset(x, y) - self._pointer_start)
        self.state.set_offset(offset)
        return offset

    def pointer_up(self) -> None:
        self._stop()

    def pointer_leave(self) -> None:
        self._stop()

    def _stop(self) -> None:
        if self.dragging:
            logger.debug("drag end on %s at %s", self.preview.label, self.state.transform.offset)
        self.drag_state = DragState.IDLE
        self._pointer_start = None
        self._offset_start = None
