import io

import pytest
from PIL import Image

from cmyk_pdf.color_utils import convert_to_cmyk
from cmyk_pdf.errors import ExtractionError, SerializationError
from cmyk_pdf.models import LayoutOptions, PagePlan, PageSlice
from cmyk_pdf.pagination import plan_pages
from cmyk_pdf.pdf_utils import assemble_pdf, compute_placement, extract_slice, render_page, render_pages

UNIT_LAYOUT = LayoutOptions(page_width=595, page_height=820, bottom_margin=20)


def is_white(pixel, tolerance=12):
    return all(channel <= tolerance for channel in pixel)


def test_placement_left_aligned_top_of_page():
    plan = plan_pages(595, 1800, UNIT_LAYOUT)
    first, _, last = [compute_placement(s, plan, UNIT_LAYOUT) for s in plan.slices]

    assert (first.x, first.y, first.width, first.height) == (0, 20, 595, 800)
    assert (last.x, last.y, last.height) == (0, 620, 200)


def test_placement_centered():
    options = LayoutOptions(scale_policy="fit_page", horizontal_align="center")
    plan = plan_pages(100, 2000, options)
    placement = compute_placement(plan.slices[0], plan, options)

    assert placement.width == pytest.approx(100 * 841.89 / 2000)
    assert placement.x == pytest.approx((595.28 - placement.width) / 2)
    assert placement.y >= options.bottom_margin


def test_first_page_without_margin_sits_on_bottom_edge():
    options = UNIT_LAYOUT.model_copy(update={"first_page_margin": False})
    plan = plan_pages(595, 1800, options)

    assert compute_placement(plan.slices[0], plan, options).y == 0
    assert compute_placement(plan.slices[1], plan, options).y == 20


def test_every_page_keeps_bottom_margin_free():
    options = LayoutOptions()
    plan = plan_pages(1000, 7000, options)
    for s in plan.slices:
        placement = compute_placement(s, plan, options)
        assert placement.y >= options.bottom_margin - 1e-9
        assert placement.y + placement.height == pytest.approx(options.page_height)


def test_extract_slice_out_of_bounds():
    img = Image.new("CMYK", (10, 100))
    with pytest.raises(ExtractionError):
        extract_slice(img, PageSlice(index=1, top=50, height=100))


def test_extract_slice_rows():
    img = Image.new("CMYK", (10, 100))
    piece = extract_slice(img, PageSlice(index=0, top=20, height=30))
    assert piece.size == (10, 30)


def test_render_page_places_slice_on_canvas():
    plan = plan_pages(595, 1800, UNIT_LAYOUT)
    slice_img = Image.new("CMYK", (595, 800), (0, 0, 0, 255))
    placement = compute_placement(plan.slices[0], plan, UNIT_LAYOUT)

    page = Image.open(io.BytesIO(render_page(slice_img, placement, plan, UNIT_LAYOUT)))

    assert page.format == "JPEG"
    assert page.mode == "CMYK"
    assert page.size == (595, 820)
    assert page.getpixel((300, 400))[3] > 200
    assert is_white(page.getpixel((300, 815)))


def test_render_page_first_page_flush_bottom():
    options = UNIT_LAYOUT.model_copy(update={"first_page_margin": False})
    plan = plan_pages(595, 1800, options)
    slice_img = Image.new("CMYK", (595, 800), (0, 0, 0, 255))
    placement = compute_placement(plan.slices[0], plan, options)

    page = Image.open(io.BytesIO(render_page(slice_img, placement, plan, options)))

    assert is_white(page.getpixel((300, 5)))
    assert page.getpixel((300, 815))[3] > 200


def test_render_pages_parallel_keeps_order(make_image, tmp_path):
    converted = convert_to_cmyk(make_image(300, 2500), str(tmp_path / "c.tif"))
    options = LayoutOptions(bottom_margin=40)
    plan = plan_pages(converted.width, converted.height, options)

    sequential = render_pages(converted, plan, options)
    parallel = render_pages(converted, plan, options.model_copy(update={"render_workers": 4}))

    assert len(sequential) == plan.total_pages > 1
    assert sequential == parallel


def test_assemble_pdf(make_image, tmp_path):
    converted = convert_to_cmyk(make_image(595, 1800), str(tmp_path / "c.tif"))
    plan = plan_pages(converted.width, converted.height, LayoutOptions())
    pdf_bytes = assemble_pdf(render_pages(converted, plan, LayoutOptions()), LayoutOptions())

    assert pdf_bytes.startswith(b"%PDF-")
    assert b"/DeviceCMYK" in pdf_bytes


def test_assemble_pdf_without_pages():
    with pytest.raises(SerializationError):
        assemble_pdf([], LayoutOptions())


def test_assemble_pdf_rejects_garbage():
    with pytest.raises(SerializationError):
        assemble_pdf([b"not an image"], LayoutOptions())


def test_render_page_keeps_full_slice_width():
    # A slice one pixel wider than the page canvas at this scale
    options = LayoutOptions(page_width=595, page_height=820, bottom_margin=20)
    plan = PagePlan(
        scale=1.0,
        visible_height_px=800,
        image_width=596,
        image_height=100,
        slices=[PageSlice(index=0, top=0, height=100)],
    )
    slice_img = Image.new("CMYK", (596, 100), (0, 0, 0, 255))
    placement = compute_placement(plan.slices[0], plan, options)

    page = Image.open(io.BytesIO(render_page(slice_img, placement, plan, options)))

    assert page.width == 596
    assert page.getpixel((595, 50))[3] > 200
