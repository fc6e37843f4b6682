"""
Standard display ad slots rendered by the visualizer.

Sizes are grouped by family the way the preview page lays them out. The
billboard is the primary slot: it is the only preview that accepts drag input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class SizeFamily(Enum):
    HIGH_IMPACT = "Billboard high impact"
    RECTANGLES = "Rectangles high volume"
    LEADERBOARDS = "Leaderboards"
    SKYSCRAPERS = "Skyscrapers"


@dataclass(frozen=True)
class TargetSize:
    width: int
    height: int
    label: str
    family: SizeFamily = SizeFamily.RECTANGLES

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"size must be positive, got {self.width}x{self.height}")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def slug(self) -> str:
        return f"{slugify(self.label)}-{self.width}x{self.height}"


def slugify(label: str) -> str:
    return re.sub(r"\s+", "-", label.strip().lower())


BILLBOARD = TargetSize(970, 250, "Billboard", SizeFamily.HIGH_IMPACT)

SIZE_CATALOG: tuple[TargetSize, ...] = (
    BILLBOARD,
    TargetSize(300, 250, "Medium rectangle", SizeFamily.RECTANGLES),
    TargetSize(336, 280, "Large rectangle", SizeFamily.RECTANGLES),
    TargetSize(250, 250, "Square", SizeFamily.RECTANGLES),
    TargetSize(728, 90, "Leaderboard", SizeFamily.LEADERBOARDS),
    TargetSize(320, 50, "Mobile leaderboard", SizeFamily.LEADERBOARDS),
    TargetSize(320, 100, "Large mobile", SizeFamily.LEADERBOARDS),
    TargetSize(300, 600, "Half page", SizeFamily.SKYSCRAPERS),
    TargetSize(160, 600, "Wide skyscraper", SizeFamily.SKYSCRAPERS),
    TargetSize(240, 400, "Vertical rectangle", SizeFamily.SKYSCRAPERS),
)

PRIMARY_SIZE = BILLBOARD
