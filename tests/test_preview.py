import asyncio
import threading
import io

from PIL import Image

from display_visualizer.assembly.render import rasterize
from display_visualizer.catalog import BILLBOARD, SIZE_CATALOG, SizeFamily, TargetSize
from display_visualizer.creative import Offset
from display_visualizer.preview import (
    EXPORT_FAILED_MESSAGE,
    ExportOptions,
    Notifier,
    PreviewBoard,
    PreviewInstance,
)


def test_export_filename_uses_label_and_size(state):
    preview = PreviewInstance(TargetSize(320, 50, "Mobile leaderboard"), state)
    assert preview.export_filename() == "mobile-leaderboard-320x50.png"


def test_export_renders_at_pixel_ratio(state_with_image):
    state_with_image.update_copy(headline="Hello", cta_label="Buy")
    preview = PreviewInstance(BILLBOARD, state_with_image, interactive=True)
    result = asyncio.run(preview.export())
    assert result.filename == "billboard-970x250.png"
    assert result.options == ExportOptions(cache_bust=True, pixel_ratio=2)
    assert Image.open(io.BytesIO(result.png)).size == (1940, 500)


def test_export_failure_alerts_and_returns_none(state):
    def broken(rendered, pixel_ratio):
        raise RuntimeError("rasterizer exploded")

    notifier = Notifier()
    preview = PreviewInstance(BILLBOARD, state, notifier=notifier, rasterizer=broken)
    version = state.version

    assert asyncio.run(preview.export()) is None
    assert notifier.pending == [EXPORT_FAILED_MESSAGE]
    assert state.version == version
    notifier.dismiss()
    assert notifier.pending == []


def test_previews_render_from_shared_state(state):
    board = PreviewBoard(state)
    state.update_copy(headline="Shared")
    for preview in board.previews.values():
        assert preview.render().text.headline.text == "Shared"


def test_board_has_exactly_one_interactive_preview(state):
    board = PreviewBoard(state)
    interactive = [p for p in board.previews.values() if p.interactive]
    assert interactive == [board.primary]
    assert board.primary.size == BILLBOARD
    assert board.drag.preview is board.primary


def test_board_without_primary_has_no_drag(state):
    board = PreviewBoard(state, primary=None)
    assert board.primary is None
    assert board.drag is None


def test_board_groups_by_family(state):
    grouped = PreviewBoard(state).by_family()
    assert [p.label for p in grouped[SizeFamily.HIGH_IMPACT]] == ["Billboard"]
    assert len(grouped[SizeFamily.SKYSCRAPERS]) == 3
    assert sum(len(v) for v in grouped.values()) == len(SIZE_CATALOG)


def test_preview_png_cache_is_dropped_on_change(state):
    board = PreviewBoard(state)
    slug = BILLBOARD.slug
    first = board.preview_png(slug)
    assert board.preview_png(slug) is first
    state.update_copy(headline="Changed")
    assert board.preview_png(slug) is not first


def test_close_unsubscribes(state):
    board = PreviewBoard(state)
    board.close()
    board.preview_png(BILLBOARD.slug)
    state.update_copy(headline="after close")
    assert BILLBOARD.slug in board._png_cache


def test_render_that_races_a_change_is_not_cached(state_with_image):
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow(rendered, pixel_ratio):
        calls.append(pixel_ratio)
        if len(calls) == 1:
            started.set()
            release.wait(timeout=5)
        return rasterize(rendered, pixel_ratio)

    board = PreviewBoard(state_with_image, rasterizer=slow)
    slug = BILLBOARD.slug
    worker = threading.Thread(target=board.preview_png, args=(slug,))
    worker.start()
    assert started.wait(timeout=5)
    state_with_image.set_offset(Offset(300, 0))
    release.set()
    worker.join(timeout=5)

    assert board.preview_png(slug) == board.previews[slug].render_png(1)
    assert board._png_cache[slug][0] == state_with_image.version
