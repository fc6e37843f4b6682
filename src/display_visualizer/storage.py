from __future__ import annotations

import json
import logging
import math
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from display_visualizer.config import settings
from display_visualizer.creative import CreativeContent, ImageTransform, normalize_color

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Preset:
    # Everything the user can tune except the image itself.
    id: str
    name: str
    headline: str
    subhead: str
    cta_label: str
    accent_color: str
    dark_theme: bool
    image_scale: float
    image_offset: dict[str, float] = field(default_factory=lambda: {"x": 0.0, "y": 0.0})
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Preset:
        offset = data.get("image_offset") or {}
        scale = float(data.get("image_scale", 1.0))
        x = float(offset.get("x", 0.0))
        y = float(offset.get("y", 0.0))
        if not all(math.isfinite(v) for v in (scale, x, y)):
            raise ValueError("image scale and offset must be finite numbers")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            headline=str(data.get("headline", "")),
            subhead=str(data.get("subhead", "")),
            cta_label=str(data.get("cta_label", "")),
            accent_color=normalize_color(str(data.get("accent_color", settings.default_accent_color))),
            dark_theme=bool(data.get("dark_theme", False)),
            image_scale=scale,
            image_offset={"x": x, "y": y},
            created_at=str(data.get("created_at", "")),
        )


class PresetStore:
    """
    Newest-first, capped list of presets kept in `<root_dir>/<key>.json`.

    The file is read once on construction and rewritten on every change.
    Storage problems never reach the caller: a bad file reads as empty and a
    failed write is only logged.
    """

    def __init__(self, root_dir: Path | None = None, key: str | None = None, cap: int | None = None) -> None:
        self.root_dir = Path(root_dir or settings.data_dir).resolve()
        self.key = key or settings.presets_key
        self.cap = cap or settings.presets_cap
        self.path = self.root_dir / f"{self.key}.json"
        self._presets: list[Preset] = self._read()

    def list_presets(self) -> list[Preset]:
        return list(self._presets)

    def get(self, preset_id: str) -> Preset | None:
        return next((p for p in self._presets if p.id == preset_id), None)

    def save(self, name: str, content: CreativeContent, transform: ImageTransform) -> Preset:
        name = (name or "").strip()
        if not name:
            raise ValueError("preset name must not be empty")
        preset = Preset(
            id=uuid.uuid4().hex[:12],
            name=name,
            headline=content.headline,
            subhead=content.subhead,
            cta_label=content.cta_label,
            accent_color=content.accent_color,
            dark_theme=content.dark_theme,
            image_scale=transform.scale,
            image_offset={"x": transform.offset.x, "y": transform.offset.y},
            created_at=_now_iso(),
        )
        evicted = self._presets[self.cap - 1 :]
        self._presets = [preset, *self._presets][: self.cap]
        for old in evicted:
            logger.info("preset %s (%s) evicted, cap is %d", old.id, old.name, self.cap)
        self._write()
        return preset

    def delete(self, preset_id: str) -> bool:
        remaining = [p for p in self._presets if p.id != preset_id]
        if len(remaining) == len(self._presets):
            return False
        self._presets = remaining
        self._write()
        return True

    def _read(self) -> list[Preset]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not load presets from %s: %s", self.path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Could not load presets from %s: expected a JSON array", self.path)
            return []

        out: list[Preset] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                out.append(Preset.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed preset entry: %s", exc)
        return out[: self.cap]

    def _write(self) -> None:
        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
            payload = [asdict(p) for p in self._presets[: self.cap]]
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save presets to %s: %s", self.path, exc)
