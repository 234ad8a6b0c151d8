import os
import tempfile

from .models import LayoutOptions

# A4 in PDF points
PAGE_WIDTH_PT = float(os.getenv("PAGE_WIDTH_PT", "595.28"))
PAGE_HEIGHT_PT = float(os.getenv("PAGE_HEIGHT_PT", "841.89"))
BOTTOM_MARGIN_PT = float(os.getenv("BOTTOM_MARGIN_PT", "20"))
SCALE_POLICY = os.getenv("SCALE_POLICY", "fit_width")
HORIZONTAL_ALIGN = os.getenv("HORIZONTAL_ALIGN", "left")
FIRST_PAGE_MARGIN = os.getenv("FIRST_PAGE_MARGIN", "true").lower() == "true"
PAGE_BG_COLOR = (0, 0, 0, 0)  # CMYK white
JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "95"))
RENDER_WORKERS = int(os.getenv("RENDER_WORKERS", "1"))

SCRATCH_ROOT = os.getenv("SCRATCH_ROOT", tempfile.gettempdir())
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
OUTPUT_FILENAME = "output-cmyk.pdf"

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
ROOT_PATH = os.getenv("ROOT_PATH", "")
APP_ENV = os.getenv("APP_ENV", "production")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def default_layout() -> LayoutOptions:
    return LayoutOptions(
        page_width=PAGE_WIDTH_PT,
        page_height=PAGE_HEIGHT_PT,
        bottom_margin=BOTTOM_MARGIN_PT,
        scale_policy=SCALE_POLICY,
        horizontal_align=HORIZONTAL_ALIGN,
        first_page_margin=FIRST_PAGE_MARGIN,
        jpeg_quality=JPEG_QUALITY,
        render_workers=RENDER_WORKERS,
    )
