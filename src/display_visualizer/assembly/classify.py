from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Aspect ratio beyond which a slot counts as wide (leaderboard) or tall (skyscraper).
ASPECT_THRESHOLD = 1.5
# Slots at or below this height get the compact "micro" treatment.
MICRO_MAX_HEIGHT = 60


class LayoutClass(Enum):
    LEADERBOARD = "leaderboard"
    SKYSCRAPER = "skyscraper"
    MICRO = "micro"
    STANDARD = "standard"


@dataclass(frozen=True)
class Classification:
    layout_class: LayoutClass
    micro: bool

    @property
    def label(self) -> LayoutClass:
        """
        Single-label view of the classification. Micro only wins over Standard;
        a short leaderboard is still reported as a leaderboard.
        """
        if self.micro and self.layout_class is LayoutClass.STANDARD:
            return LayoutClass.MICRO
        return self.layout_class


def is_leaderboard(width: float, height: float) -> bool:
    return width > height * ASPECT_THRESHOLD


def is_skyscraper(width: float, height: float) -> bool:
    return height > width * ASPECT_THRESHOLD


def is_micro(width: float, height: float) -> bool:
    return height <= MICRO_MAX_HEIGHT


def classify(width: float, height: float) -> Classification:
    """
    Map a pixel size to its layout class plus the independent micro flag.

    Classification uses aspect-ratio thresholds rather than a list of known ad
    slots, so arbitrary sizes still get a sensible layout.
    """
    if is_leaderboard(width, height):
        layout_class = LayoutClass.LEADERBOARD
    elif is_skyscraper(width, height):
        layout_class = LayoutClass.SKYSCRAPER
    else:
        layout_class = LayoutClass.STANDARD
    return Classification(layout_class=layout_class, micro=is_micro(width, height))
