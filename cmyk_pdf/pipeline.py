import logging
import os

from .color_utils import convert_to_cmyk
from .config import MAX_UPLOAD_BYTES, SCRATCH_ROOT
from .errors import UploadTooLarge
from .models import LayoutOptions
from .pagination import plan_pages
from .pdf_utils import assemble_pdf, render_pages
from .scratch import ScratchSpace

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def convert_image_to_pdf(source_path: str, scratch: ScratchSpace, options: LayoutOptions):
    """
    Run the conversion for an image already on disk:
      1. Convert it to CMYK.
      2. Plan the page slices.
      3. Render each slice onto its own page.
      4. Assemble the pages into one PDF.
    Returns the PDF bytes and the page plan.
    """
    converted = convert_to_cmyk(source_path, scratch.path("converted.tif"))
    plan = plan_pages(converted.width, converted.height, options)
    pages = render_pages(converted, plan, options)
    pdf_bytes = assemble_pdf(pages, options)
    return pdf_bytes, plan


def save_upload(stream, dest_path: str, max_bytes: int = MAX_UPLOAD_BYTES) -> int:
    written = 0
    with open(dest_path, "wb") as f:
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if max_bytes and written > max_bytes:
                raise UploadTooLarge(f"Upload exceeds the {max_bytes} byte limit")
            f.write(chunk)
    return written


def convert_upload(stream, filename: str, options: LayoutOptions, scratch_root=SCRATCH_ROOT,
                   max_bytes: int = MAX_UPLOAD_BYTES) -> bytes:
    """Persist an uploaded image to a fresh scratch directory and convert it."""
    _, ext = os.path.splitext(filename or "")
    with ScratchSpace(root=scratch_root) as scratch:
        source_path = scratch.path(f"source{ext.lower()}")
        size = save_upload(stream, source_path, max_bytes=max_bytes)
        logger.info(f"Upload '{filename}' saved to {source_path} ({size} bytes)")

        pdf_bytes, plan = convert_image_to_pdf(source_path, scratch, options)
        logger.info(f"Converted '{filename}' to CMYK PDF with {plan.total_pages} page(s)")
        return pdf_bytes
