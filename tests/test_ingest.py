import pytest

from display_visualizer.ingest import ImageDecodeError, decode_upload


def test_decode_png(png_bytes):
    v = decode_upload("../banner.png", png_bytes, "image/png")
    assert (v.width, v.height) == (200, 120)
    assert v.filename == "banner.png"
    assert v.data_url.startswith("data:image/png;base64,")
    assert len(v.sha256) == 64


def test_content_type_falls_back_to_detected_format(png_bytes):
    v = decode_upload("banner", png_bytes, "application/octet-stream")
    assert v.content_type == "image/png"


@pytest.mark.parametrize("payload", [b"", b"definitely not an image"])
def test_undecodable_upload(payload):
    with pytest.raises(ImageDecodeError):
        decode_upload("bad.png", payload, "image/png")
