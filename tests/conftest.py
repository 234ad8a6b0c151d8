import io

import pytest
from PIL import Image, ImageDraw


def striped_image(width, height, mode="RGB"):
    """An image with a horizontal band every 100 rows so page slices differ."""
    img = Image.new("RGB", (width, height), (255, 255, 255))
    draw = ImageDraw.Draw(img)
    colors = [(200, 30, 30), (30, 200, 30), (30, 30, 200)]
    for i, top in enumerate(range(0, height, 100)):
        draw.rectangle([0, top, width - 1, min(top + 49, height - 1)], fill=colors[i % 3])
    return img.convert(mode) if mode != "RGB" else img


@pytest.fixture
def make_image(tmp_path):
    def _make(width, height, mode="RGB", name="input.png", dpi=None):
        path = tmp_path / name
        img = striped_image(width, height, mode)
        if dpi:
            img.save(path, dpi=dpi)
        else:
            img.save(path)
        return str(path)
    return _make


@pytest.fixture
def png_bytes():
    def _make(width, height):
        buf = io.BytesIO()
        striped_image(width, height).save(buf, format="PNG")
        return buf.getvalue()
    return _make


@pytest.fixture
def scratch_root(tmp_path):
    return tmp_path / "scratch"
