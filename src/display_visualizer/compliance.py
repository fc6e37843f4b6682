from __future__ import annotations

from dataclasses import dataclass

from display_visualizer.config import settings
from display_visualizer.creative import CreativeContent


@dataclass(frozen=True)
class CharCount:
    current: int
    limit: int

    @property
    def over(self) -> bool:
        return self.current > self.limit

    def __str__(self) -> str:
        return f"{self.current}/{self.limit}"


def copy_limits() -> dict[str, int]:
    return {
        "headline": settings.headline_limit,
        "subhead": settings.subhead_limit,
        "cta_label": settings.cta_limit,
    }


def check_copy(content: CreativeContent) -> dict[str, CharCount]:
    """
    Character counters for the copy fields. Going over a limit is only a
    warning; rendering is never blocked.
    """
    limits = copy_limits()
    return {
        "headline": CharCount(len(content.headline), limits["headline"]),
        "subhead": CharCount(len(content.subhead), limits["subhead"]),
        "cta_label": CharCount(len(content.cta_label), limits["cta_label"]),
    }
