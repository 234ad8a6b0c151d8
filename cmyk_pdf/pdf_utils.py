import concurrent.futures
import io
import logging

import img2pdf
from PIL import Image

from .config import PAGE_BG_COLOR
from .errors import ExtractionError, SerializationError
from .models import ConvertedImage, LayoutOptions, PagePlacement, PagePlan, PageSlice

logger = logging.getLogger(__name__)


def compute_placement(page_slice: PageSlice, plan: PagePlan, options: LayoutOptions) -> PagePlacement:
    width = plan.image_width * plan.scale
    height = page_slice.height * plan.scale

    if options.horizontal_align == "center":
        x = (options.page_width - width) / 2
    else:
        x = 0.0

    if page_slice.index == 0 and not options.first_page_margin:
        y = 0.0
    else:
        # Top-aligned; slices are planned so at least bottom_margin stays free below
        y = options.page_height - height

    return PagePlacement(x=x, y=y, width=width, height=height)


def extract_slice(img: Image.Image, page_slice: PageSlice) -> Image.Image:
    if page_slice.height <= 0 or page_slice.top < 0 or page_slice.bottom > img.height:
        raise ExtractionError(
            f"Slice {page_slice.index} rows {page_slice.top}-{page_slice.bottom} "
            f"outside image of height {img.height}"
        )
    return img.crop((0, page_slice.top, img.width, page_slice.bottom))


def render_page(slice_img: Image.Image, placement: PagePlacement, plan: PagePlan, options: LayoutOptions) -> bytes:
    """
    Paste a slice onto a blank CMYK page at the source resolution and encode it as JPEG.
    The canvas maps 1:1 onto the PDF page, so pixel offsets follow the placement in points.
    """
    scale = plan.scale
    # Never narrower or shorter than the slice, so rounding cannot crop it
    canvas_w = max(1, round(options.page_width / scale), slice_img.width)
    canvas_h = max(1, round(options.page_height / scale), slice_img.height)

    left = round(placement.x / scale)
    top = round((options.page_height - placement.y - placement.height) / scale)
    left = max(0, min(left, canvas_w - slice_img.width))
    top = max(0, min(top, canvas_h - slice_img.height))

    page = Image.new("CMYK", (canvas_w, canvas_h), PAGE_BG_COLOR)
    try:
        page.paste(slice_img, (left, top))
        ppi = 72 / scale
        buf = io.BytesIO()
        page.save(buf, format="JPEG", quality=options.jpeg_quality, dpi=(ppi, ppi))
        return buf.getvalue()
    finally:
        page.close()


def render_pages(converted: ConvertedImage, plan: PagePlan, options: LayoutOptions):
    """Render every slice of the plan to an encoded page, in slice order."""
    with Image.open(converted.path) as img:
        img.load()

        def render_one(page_slice):
            slice_img = extract_slice(img, page_slice)
            try:
                placement = compute_placement(page_slice, plan, options)
                logger.debug(
                    f"Page {page_slice.index + 1}/{plan.total_pages}: rows {page_slice.top}-{page_slice.bottom} "
                    f"at x={placement.x:.2f} y={placement.y:.2f} {placement.width:.2f}x{placement.height:.2f}pt"
                )
                return render_page(slice_img, placement, plan, options)
            finally:
                slice_img.close()

        if options.render_workers > 1:
            # executor.map yields results in input order
            with concurrent.futures.ThreadPoolExecutor(max_workers=options.render_workers) as executor:
                return list(executor.map(render_one, plan.slices))
        return [render_one(s) for s in plan.slices]


def assemble_pdf(pages, options: LayoutOptions) -> bytes:
    if not pages:
        raise SerializationError("Cannot build a PDF with no pages")
    layout_fun = img2pdf.get_layout_fun(
        (options.page_width, options.page_height), fit=img2pdf.FitMode.exact
    )
    try:
        pdf_bytes = img2pdf.convert(pages, layout_fun=layout_fun)
    except Exception as e:
        raise SerializationError(f"PDF assembly failed: {e}") from e
    logger.info(f"PDF assembled: {len(pages)} page(s), {len(pdf_bytes)} bytes")
    return pdf_bytes
