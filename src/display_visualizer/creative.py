from __future__ import annotations

import base64
import re
from dataclasses import dataclass, field

from display_visualizer.config import settings

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class ImageVariant:
    variant_id: str
    filename: str
    content_type: str
    content: bytes = field(repr=False)
    width: int
    height: int
    sha256: str

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


@dataclass(frozen=True)
class Offset:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Offset) -> Offset:
        return Offset(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Offset) -> Offset:
        return Offset(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class ImageTransform:
    scale: float = 1.0
    offset: Offset = Offset()

    @property
    def css(self) -> str:
        return f"translate({_fmt(self.offset.x)}px, {_fmt(self.offset.y)}px) scale({_fmt(self.scale)})"


@dataclass(frozen=True)
class CreativeContent:
    image: ImageVariant | None = None
    headline: str = ""
    subhead: str = ""
    cta_label: str = ""
    accent_color: str = settings.default_accent_color
    dark_theme: bool = False


def clamp_scale(value: float) -> float:
    return max(settings.scale_min, min(settings.scale_max, float(value)))


def normalize_color(value: str) -> str:
    """
    Accept #RGB or #RRGGBB and return upper-case #RRGGBB.
    """
    s = (value or "").strip()
    if not _HEX_COLOR.match(s):
        raise ValueError(f"invalid color: {value!r}")
    s = s.lstrip("#")
    if len(s) == 3:
        s = "".join([c * 2 for c in s])
    return f"#{s.upper()}"


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    s = normalize_color(hex_color).lstrip("#")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def _fmt(value: float) -> str:
    return f"{value:g}"
