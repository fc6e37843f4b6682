from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from display_visualizer.ingest import decode_upload
from display_visualizer.state import CreativeState


def make_png(size: tuple[int, int] = (200, 120), color: tuple[int, int, int] = (30, 120, 200)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def variant(png_bytes):
    return decode_upload("creative.png", png_bytes, "image/png")


@pytest.fixture
def state() -> CreativeState:
    return CreativeState()


@pytest.fixture
def state_with_image(state, variant) -> CreativeState:
    state.add_image(variant)
    return state


@pytest.fixture
def api(tmp_path):
    from display_visualizer.api import app as app_module

    app_module.reset_session(tmp_path)
    return app_module


@pytest.fixture
def client(api):
    with TestClient(api.app) as c:
        yield c
