from __future__ import annotations

import io
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from display_visualizer.assembly.layout import (
    LINE_HEIGHT,
    Box,
    CtaRegion,
    ImageRegion,
    Palette,
    RenderedCreative,
    TextLine,
    TextRegion,
)
from display_visualizer.creative import hex_to_rgb

HEADLINE_LEADING = 1.25
SUBHEAD_GAP = 4
DASH = 4


def rasterize(rendered: RenderedCreative, pixel_ratio: int = 1) -> Image.Image:
    """
    Paint a laid-out creative into a Pillow image.

    Layout boxes are CSS pixels; every coordinate is multiplied by `pixel_ratio`
    so exports can be rendered at 2x without touching the layout.
    """
    r = max(1, int(pixel_ratio))
    w, h = rendered.size
    palette = rendered.palette
    base = Image.new("RGBA", (w * r, h * r), _rgba(palette.background))

    _paint_image_region(base, rendered.image, palette, r)

    draw = ImageDraw.Draw(base)
    _draw_text_region(draw, rendered.text, r)
    _draw_cta_button(draw, rendered.cta, r)

    # 1px border on top of everything, like the card outline on the page.
    draw.rectangle([(0, 0), (w * r - 1, h * r - 1)], outline=_rgba(palette.border), width=r)
    return base.convert("RGB")


def to_png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def _paint_image_region(base: Image.Image, region: ImageRegion, palette: Palette, r: int) -> None:
    x0, y0, x1, y1 = _scaled(region.box, r)
    rw, rh = x1 - x0, y1 - y0
    if rw <= 0 or rh <= 0:
        return

    layer = Image.new("RGBA", (rw, rh), (0, 0, 0, 0))
    if region.element is not None:
        _paint_creative(layer, region, r)
    elif region.placeholder is not None:
        _paint_placeholder(layer, region.placeholder.icon_size * r, palette, r)
    base.alpha_composite(layer, dest=(x0, y0))


def _paint_creative(layer: Image.Image, region: ImageRegion, r: int) -> None:
    """
    object-contain into the region, then scale about the region centre and
    translate by the offset. Whatever falls outside the region is clipped.
    """
    element = region.element
    src = _decode(element.variant.content)
    rw, rh = layer.size
    iw, ih = src.size
    if iw <= 0 or ih <= 0:
        return

    # max-width/max-height 100%: shrink to fit, never enlarge.
    fit = min(1.0, rw / (iw * r), rh / (ih * r)) * r
    total = fit * element.transform.scale
    nw, nh = max(1, round(iw * total)), max(1, round(ih * total))
    resized = src.resize((nw, nh), Image.Resampling.LANCZOS)

    cx = rw / 2 + element.transform.offset.x * r
    cy = rh / 2 + element.transform.offset.y * r
    clipped, dest = _clip_paste(resized, round(cx - nw / 2), round(cy - nh / 2), rw, rh)
    layer.alpha_composite(clipped, dest=dest)


def _clip_paste(img: Image.Image, x: int, y: int, rw: int, rh: int) -> tuple[Image.Image, tuple[int, int]]:
    """
    Crop `img` placed at (x, y) to the (0, 0, rw, rh) window. alpha_composite
    rejects negative destinations, so the crop carries the clipping.
    """
    left = max(0, -x)
    top = max(0, -y)
    right = min(img.width, rw - x)
    bottom = min(img.height, rh - y)
    if right <= left or bottom <= top:
        return Image.new("RGBA", (1, 1), (0, 0, 0, 0)), (0, 0)
    return img.crop((left, top, right, bottom)), (x + left, y + top)


@lru_cache(maxsize=16)
def _decode(content: bytes) -> Image.Image:
    with Image.open(io.BytesIO(content)) as img:
        return img.convert("RGBA")


def _paint_placeholder(layer: Image.Image, icon_px: int, palette: Palette, r: int) -> None:
    draw = ImageDraw.Draw(layer)
    w, h = layer.size
    draw.rounded_rectangle([(0, 0), (w - 1, h - 1)], radius=4 * r, fill=_rgba(palette.placeholder_fill))
    _draw_dashed_rect(draw, (0, 0, w - 1, h - 1), _rgba(palette.placeholder_border), DASH * r, r)

    # Picture glyph: frame, sun, mountain.
    color = _rgba(palette.placeholder_icon)
    s = icon_px
    ix0, iy0 = (w - s) // 2, (h - s) // 2
    stroke = max(1, s // 12)
    draw.rounded_rectangle([(ix0, iy0), (ix0 + s, iy0 + s)], radius=max(1, s // 8), outline=color, width=stroke)
    sun = max(1, s // 8)
    draw.ellipse([(ix0 + s // 3 - sun, iy0 + s // 3 - sun), (ix0 + s // 3 + sun, iy0 + s // 3 + sun)], outline=color, width=stroke)
    draw.line(
        [(ix0 + stroke, iy0 + s * 3 // 4), (ix0 + s // 2, iy0 + s // 2), (ix0 + s - stroke, iy0 + s - stroke)],
        fill=color,
        width=stroke,
    )


def _draw_dashed_rect(draw: ImageDraw.ImageDraw, box: Box, fill, dash: int, width: int) -> None:
    x0, y0, x1, y1 = box
    for x in range(x0, x1, dash * 2):
        end = min(x + dash, x1)
        draw.line([(x, y0), (end, y0)], fill=fill, width=width)
        draw.line([(x, y1), (end, y1)], fill=fill, width=width)
    for y in range(y0, y1, dash * 2):
        end = min(y + dash, y1)
        draw.line([(x0, y), (x0, end)], fill=fill, width=width)
        draw.line([(x1, y), (x1, end)], fill=fill, width=width)


def _draw_text_region(draw: ImageDraw.ImageDraw, region: TextRegion, r: int) -> None:
    x0, y0, x1, y1 = _scaled(region.box, r)
    max_w = max(1, x1 - x0)

    blocks: list[tuple[TextLine, list[str], int]] = []
    for line, leading in ((region.headline, HEADLINE_LEADING), (region.subhead, LINE_HEIGHT)):
        if line is None or not line.text:
            continue
        font = _load_font(line.font_px * r, bold=line.bold)
        wrapped = _wrap_to_width(draw, line.text, font, max_w)
        blocks.append((line, wrapped, round(line.font_px * r * leading)))

    # Stack headline and subhead and center the stack vertically.
    total_h = sum(len(lines) * step for _, lines, step in blocks)
    if len(blocks) > 1:
        total_h += SUBHEAD_GAP * r
    y = y0 + max(0, ((y1 - y0) - total_h) // 2)

    for idx, (line, lines, step) in enumerate(blocks):
        if idx:
            y += SUBHEAD_GAP * r
        font = _load_font(line.font_px * r, bold=line.bold)
        for text in lines:
            tw = _text_width(draw, text, font)
            tx = x0 + (max_w - tw) // 2 if region.align == "center" else x0
            draw.text((tx, y), text, font=font, fill=_rgba(line.color))
            y += step


def _draw_cta_button(draw: ImageDraw.ImageDraw, cta: CtaRegion, r: int) -> None:
    bx0, by0, bx1, by1 = _scaled(cta.button, r)
    if bx1 <= bx0 or by1 <= by0:
        return
    draw.rounded_rectangle([(bx0, by0), (bx1 - 1, by1 - 1)], radius=cta.radius * r, fill=_rgba(cta.fill))
    if not cta.label:
        return

    font = _load_font(cta.font_px * r, bold=True)
    try:
        bbox = draw.textbbox((0, 0), cta.label, font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        ty = by0 + ((by1 - by0) - th) // 2 - bbox[1]
    except Exception:
        tw, ty = 0, by0
    tx = bx0 + ((bx1 - bx0) - tw) // 2
    draw.text((tx, ty), cta.label, font=font, fill=_rgba(cta.text_color))


@lru_cache(maxsize=64)
def _load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Prefer a TTF font (bundled or system). If none is found, fall back to
    Pillow's default font so rendering never crashes.
    """
    regular = [
        "assets/fonts/DejaVuSans.ttf",
        "assets/fonts/Inter-Regular.ttf",
        "/System/Library/Fonts/Supplemental/Arial.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "/Library/Fonts/Arial.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "C:\\Windows\\Fonts\\arial.ttf",
    ]
    heavy = [
        "assets/fonts/DejaVuSans-Bold.ttf",
        "assets/fonts/Inter-Bold.ttf",
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
        "/Library/Fonts/Arial Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "C:\\Windows\\Fonts\\arialbd.ttf",
    ]
    candidates = heavy + regular if bold else regular
    for c in candidates:
        p = Path(c)
        if p.exists():
            try:
                return ImageFont.truetype(str(p), size=size)
            except OSError:
                continue
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Pillow < 10.1 has no sized default font.
        return ImageFont.load_default()


def _text_width(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0]


def _wrap_to_width(draw: ImageDraw.ImageDraw, text: str, font, max_w: int) -> list[str]:
    words = [w for w in (text or "").split() if w]
    if not words:
        return []
    lines: list[str] = []
    cur = words[0]
    for w in words[1:]:
        trial = f"{cur} {w}"
        if _text_width(draw, trial, font) <= max_w:
            cur = trial
        else:
            lines.append(cur)
            cur = w
    lines.append(cur)
    return lines


def _scaled(box: Box, r: int) -> Box:
    return (box[0] * r, box[1] * r, box[2] * r, box[3] * r)


def _rgba(hex_color: str) -> tuple[int, int, int, int]:
    red, green, blue = hex_to_rgb(hex_color)
    return (red, green, blue, 255)
