"""
Responsive layout of a creative for one ad slot.

`layout_creative` is a pure function: it only reads its arguments and returns a
frozen region tree, so equal inputs always compare equal. Every preview of the
page goes through it, which keeps simultaneously rendered sizes consistent.

All geometry is in CSS pixels; the rasterizer applies the pixel ratio.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from display_visualizer.assembly.classify import LayoutClass
from display_visualizer.creative import CreativeContent, ImageTransform, ImageVariant

Box = tuple[int, int, int, int]

PADDING = 12
ROW_GAP = 16
COLUMN_GAP = 8
TEXT_INDENT = 8
MICRO_IMAGE_WIDTH = 48
LINE_HEIGHT = 1.5
# Average glyph advance relative to font size, used to size the auto-width CTA.
GLYPH_ADVANCE = 0.6
CTA_RADIUS = 6
CTA_TEXT_COLOR = "#FFFFFF"


@dataclass(frozen=True)
class Palette:
    background: str
    border: str
    text: str
    subtext: str
    placeholder_fill: str
    placeholder_border: str
    placeholder_icon: str


LIGHT_PALETTE = Palette(
    background="#FFFFFF",
    border="#E2E8F0",
    text="#1E293B",
    subtext="#475569",
    placeholder_fill="#F8FAFC",
    placeholder_border="#CBD5E1",
    placeholder_icon="#CBD5E1",
)

DARK_PALETTE = Palette(
    background="#0F172A",
    border="#334155",
    text="#FFFFFF",
    subtext="#CBD5E1",
    placeholder_fill="#1E293B",
    placeholder_border="#475569",
    placeholder_icon="#64748B",
)


@dataclass(frozen=True)
class ImageElement:
    variant: ImageVariant
    transform: ImageTransform

    @property
    def css_transform(self) -> str:
        return self.transform.css


@dataclass(frozen=True)
class Placeholder:
    icon_size: int


@dataclass(frozen=True)
class ImageRegion:
    box: Box
    element: ImageElement | None
    placeholder: Placeholder | None

    def contains(self, x: float, y: float) -> bool:
        x0, y0, x1, y1 = self.box
        return x0 <= x < x1 and y0 <= y < y1


@dataclass(frozen=True)
class TextLine:
    text: str
    font_px: int
    color: str
    bold: bool = False


@dataclass(frozen=True)
class TextRegion:
    box: Box
    align: str  # left|center
    headline: TextLine
    subhead: TextLine | None


@dataclass(frozen=True)
class CtaRegion:
    box: Box
    button: Box
    label: str
    font_px: int
    padding: tuple[int, int]
    fill: str
    text_color: str = CTA_TEXT_COLOR
    radius: int = CTA_RADIUS


@dataclass(frozen=True)
class RenderedCreative:
    size: tuple[int, int]
    layout_class: LayoutClass
    micro: bool
    palette: Palette
    image: ImageRegion
    text: TextRegion
    cta: CtaRegion


@dataclass(frozen=True)
class Typography:
    headline_px: int
    subhead_px: int | None
    cta_px: int
    cta_padding: tuple[int, int]
    icon_px: int


def typography_for(layout_class: LayoutClass, micro: bool) -> Typography:
    if micro:
        headline_px = 11
    elif layout_class is LayoutClass.SKYSCRAPER:
        headline_px = 20
    else:
        headline_px = 18

    subhead_px: int | None
    if micro:
        subhead_px = None
    elif layout_class is LayoutClass.SKYSCRAPER:
        subhead_px = 14
    else:
        subhead_px = 12

    return Typography(
        headline_px=headline_px,
        subhead_px=subhead_px,
        cta_px=10 if micro else 12,
        cta_padding=(8, 2) if micro else (16, 6),
        icon_px=12 if micro else 24,
    )


def palette_for(dark_theme: bool) -> Palette:
    return DARK_PALETTE if dark_theme else LIGHT_PALETTE


def layout_creative(
    size: tuple[int, int],
    layout_class: LayoutClass,
    micro: bool,
    content: CreativeContent,
    transform: ImageTransform,
) -> RenderedCreative:
    w, h = size
    palette = palette_for(content.dark_theme)
    typo = typography_for(layout_class, micro)
    button_w, button_h = _button_size(content.cta_label, typo)

    if layout_class is LayoutClass.LEADERBOARD:
        image_box, text_box, cta_box, button_box = _row_geometry(w, h, micro, button_w, button_h)
        align = "left"
    else:
        image_box, text_box, cta_box, button_box = _column_geometry(
            w, h, layout_class, button_w, button_h
        )
        align = "center"

    if content.image is not None:
        image = ImageRegion(box=image_box, element=ImageElement(content.image, transform), placeholder=None)
    else:
        image = ImageRegion(box=image_box, element=None, placeholder=Placeholder(icon_size=typo.icon_px))

    subhead = None
    if typo.subhead_px is not None:
        subhead = TextLine(text=content.subhead, font_px=typo.subhead_px, color=palette.subtext)

    text = TextRegion(
        box=text_box,
        align=align,
        headline=TextLine(text=content.headline, font_px=typo.headline_px, color=palette.text, bold=True),
        subhead=subhead,
    )
    cta = CtaRegion(
        box=cta_box,
        button=button_box,
        label=content.cta_label,
        font_px=typo.cta_px,
        padding=typo.cta_padding,
        fill=content.accent_color,
    )
    return RenderedCreative(
        size=(w, h),
        layout_class=layout_class,
        micro=micro,
        palette=palette,
        image=image,
        text=text,
        cta=cta,
    )


def _button_size(label: str, typo: Typography) -> tuple[int, int]:
    pad_x, pad_y = typo.cta_padding
    text_w = math.ceil(len(label) * typo.cta_px * GLYPH_ADVANCE)
    text_h = math.ceil(typo.cta_px * LINE_HEIGHT)
    return text_w + 2 * pad_x, text_h + 2 * pad_y


def _row_geometry(
    w: int, h: int, micro: bool, button_w: int, button_h: int
) -> tuple[Box, Box, Box, Box]:
    """
    Text | CTA | image, left to right, everything vertically centered.
    """
    left, top, right, bottom = PADDING, PADDING, w - PADDING, h - PADDING
    inner_w = max(0, right - left)

    image_w = MICRO_IMAGE_WIDTH if micro else round(inner_w * 0.25)
    image_box = (right - image_w, top, right, bottom)

    button_x1 = image_box[0] - ROW_GAP
    button_x0 = button_x1 - button_w
    button_y0 = top + ((bottom - top) - button_h) // 2
    button_box = (button_x0, button_y0, button_x1, button_y0 + button_h)

    text_x0 = left + TEXT_INDENT
    text_x1 = max(text_x0, button_x0 - ROW_GAP)
    text_box = (text_x0, top, text_x1, bottom)
    return image_box, text_box, button_box, button_box


def _column_geometry(
    w: int, h: int, layout_class: LayoutClass, button_w: int, button_h: int
) -> tuple[Box, Box, Box, Box]:
    """
    Image on top, copy in the middle, CTA pinned to the bottom.
    """
    left, top, right, bottom = PADDING, PADDING, w - PADDING, h - PADDING
    inner_h = max(0, bottom - top)

    if layout_class is LayoutClass.SKYSCRAPER:
        margin_top, image_h = 32, round(inner_h / 3)
    else:
        margin_top, image_h = 16, round(inner_h / 2)
    image_y0 = top + margin_top
    image_box = (left, image_y0, right, image_y0 + image_h)

    # pt-1 above the button
    cta_box = (left, bottom - button_h - 4, right, bottom)
    button_x0 = left + ((right - left) - button_w) // 2
    button_box = (button_x0, bottom - button_h, button_x0 + button_w, bottom)

    text_y0 = image_box[3] + COLUMN_GAP
    text_y1 = max(text_y0, cta_box[1] - COLUMN_GAP)
    text_box = (left, text_y0, right, text_y1)
    return image_box, text_box, cta_box, button_box
