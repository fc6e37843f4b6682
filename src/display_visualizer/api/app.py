from __future__ import annotations

import logging
import math
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from display_visualizer.compliance import check_copy, copy_limits
from display_visualizer.config import settings
from display_visualizer.ingest import ImageDecodeError, decode_upload
from display_visualizer.preview import EXPORT_FAILED_MESSAGE, ExportOptions, Notifier, PreviewBoard
from display_visualizer.state import CreativeState
from display_visualizer.storage import PresetStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Display ads visualizer")

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

static_dir = BASE_DIR / "static"
static_dir.mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# One local user, one live creative. Mutating routes are async so they run
# one at a time on the event loop; preview renders work from a snapshot.
state: CreativeState
store: PresetStore
notifier: Notifier
board: PreviewBoard


def reset_session(data_dir: Path | str | None = None) -> None:
    """
    (Re)create the live state, preset store and previews. Called once at import;
    tests call it again to get a clean session on a temporary data dir.
    """
    global state, store, notifier, board
    state = CreativeState()
    store = PresetStore(root_dir=Path(data_dir) if data_dir else None)
    notifier = Notifier()
    board = PreviewBoard(state, notifier=notifier)


reset_session()


class PointerEvent(BaseModel):
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


def _parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)
    except Exception:
        return default
    return parsed if math.isfinite(parsed) else default


def _back_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


def _state_payload() -> dict:
    content = state.content
    transform = state.transform
    counts = check_copy(content)
    return {
        "version": state.version,
        "headline": content.headline,
        "subhead": content.subhead,
        "cta_label": content.cta_label,
        "accent_color": content.accent_color,
        "dark_theme": content.dark_theme,
        "image_scale": transform.scale,
        "image_offset": {"x": transform.offset.x, "y": transform.offset.y},
        "active_image_index": state.active_index if state.images else None,
        "images": [
            {"index": idx, "filename": v.filename, "width": v.width, "height": v.height}
            for idx, v in enumerate(state.images)
        ],
        "copy_counts": {k: {"current": c.current, "limit": c.limit, "over": c.over} for k, c in counts.items()},
    }


def _drag_payload(started: bool | None = None) -> dict:
    offset = state.transform.offset
    payload = {
        "dragging": bool(board.drag and board.drag.dragging),
        "offset": {"x": offset.x, "y": offset.y},
        "version": state.version,
    }
    if started is not None:
        payload["started"] = started
    return payload


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={
            "content": state.content,
            "transform": state.transform,
            "version": state.version,
            "images": list(enumerate(state.images)),
            "active_index": state.active_index,
            "counts": check_copy(state.content),
            "limits": copy_limits(),
            "swatches": settings.accent_swatches,
            "scale_min": settings.scale_min,
            "scale_max": settings.scale_max,
            "scale_step": settings.scale_step,
            "presets": store.list_presets(),
            "families": board.by_family(),
            "primary": board.primary,
            "alerts": notifier.pending,
        },
    )


@app.get("/state")
def get_state():
    return _state_payload()


@app.post("/copy")
async def update_copy(headline: str = Form(""), subhead: str = Form(""), cta_label: str = Form("")):
    state.update_copy(headline=headline, subhead=subhead, cta_label=cta_label)
    return _back_home()


@app.post("/design")
async def update_design(
    accent_color: str | None = Form(None),
    dark_theme: str | None = Form(None),
    image_scale: str | None = Form(None),
):
    if accent_color:
        try:
            state.set_accent_color(accent_color)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    if dark_theme is not None:
        state.set_dark_theme(_parse_bool(dark_theme))
    if image_scale is not None:
        state.set_scale(_parse_float(image_scale, state.transform.scale))
    return _back_home()


@app.post("/theme/toggle")
async def toggle_theme():
    state.toggle_theme()
    return _back_home()


@app.post("/images/upload")
async def upload_image(file: UploadFile = File(...)):
    content = await file.read()
    try:
        variant = decode_upload(file.filename or "upload.bin", content, file.content_type)
    except ImageDecodeError as exc:
        logger.warning("Rejected upload %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    idx = state.add_image(variant)
    logger.info("Added creative %s as variant %d (%dx%d)", variant.filename, idx, variant.width, variant.height)
    return _back_home()


@app.post("/images/{index}/select")
async def select_image(index: int):
    try:
        state.select_image(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail="image variant not found") from exc
    return _back_home()


@app.get("/images/{index}")
def get_image(index: int):
    images = state.images
    if index < 0 or index >= len(images):
        raise HTTPException(status_code=404, detail="image variant not found")
    variant = images[index]
    return Response(content=variant.content, media_type=variant.content_type)


@app.post("/presets")
async def save_preset(name: str = Form("Default layout")):
    try:
        preset = store.save(name, state.content, state.transform)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info("Saved preset %s (%s)", preset.id, preset.name)
    return _back_home()


@app.post("/presets/{preset_id}/apply")
async def apply_preset(preset_id: str):
    preset = store.get(preset_id)
    if not preset:
        raise HTTPException(status_code=404, detail="preset not found")
    try:
        state.apply_preset(preset)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"preset is invalid: {exc}") from exc
    return _back_home()


@app.post("/presets/{preset_id}/delete")
async def delete_preset(preset_id: str):
    if not store.delete(preset_id):
        raise HTTPException(status_code=404, detail="preset not found")
    return _back_home()


@app.post("/drag/down")
async def drag_down(event: PointerEvent):
    started = board.drag.pointer_down(event.x, event.y) if board.drag else False
    return _drag_payload(started=started)


@app.post("/drag/move")
async def drag_move(event: PointerEvent):
    if board.drag:
        board.drag.pointer_move(event.x, event.y)
    return _drag_payload()


@app.post("/drag/up")
async def drag_up():
    if board.drag:
        board.drag.pointer_up()
    return _drag_payload()


@app.post("/drag/leave")
async def drag_leave():
    if board.drag:
        board.drag.pointer_leave()
    return _drag_payload()


@app.get("/previews/{slug}.png")
def preview_png(slug: str):
    if not board.get(slug):
        raise HTTPException(status_code=404, detail="preview not found")
    return Response(content=board.preview_png(slug), media_type="image/png")


@app.get("/previews/{slug}/export")
async def export_preview(slug: str):
    preview = board.get(slug)
    if not preview:
        raise HTTPException(status_code=404, detail="preview not found")
    options = ExportOptions()
    result = await preview.export(options)
    if result is None:
        raise HTTPException(status_code=500, detail=EXPORT_FAILED_MESSAGE)
    headers = {"Content-Disposition": f'attachment; filename="{result.filename}"'}
    if options.cache_bust:
        headers["Cache-Control"] = "no-store"
    return Response(content=result.png, media_type="image/png", headers=headers)


@app.post("/alerts/dismiss")
async def dismiss_alerts():
    notifier.dismiss()
    return _back_home()
