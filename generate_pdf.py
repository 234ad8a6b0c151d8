import os
import sys

from cmyk_pdf.config import SCRATCH_ROOT, default_layout
from cmyk_pdf.errors import ConverterError
from cmyk_pdf.pipeline import convert_image_to_pdf
from cmyk_pdf.scratch import ScratchSpace

# ────────────────────────────────────────────────
# Local conversion without the web service.
# Layout settings come from the same environment variables as the API.
# ────────────────────────────────────────────────
DEFAULT_OUTPUT_PATH = os.getenv("PDF_OUTPUT_PATH", "/tmp/output-cmyk.pdf")


def generate_pdf(input_path, output_path=DEFAULT_OUTPUT_PATH):
    print(f"🖼 Converting {input_path} to CMYK...")
    with ScratchSpace(root=SCRATCH_ROOT) as scratch:
        pdf_bytes, plan = convert_image_to_pdf(input_path, scratch, default_layout())

    print(f"📄 {plan.total_pages} page(s), {plan.visible_height_px}px of image per page")
    with open(output_path, "wb") as f:
        f.write(pdf_bytes)
    print(f"✅ PDF saved: {output_path}")
    return output_path


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv or len(argv) > 2:
        print("Usage: python generate_pdf.py INPUT_IMAGE [OUTPUT_PDF]")
        return 2

    input_path = argv[0]
    output_path = argv[1] if len(argv) > 1 else DEFAULT_OUTPUT_PATH
    if not os.path.exists(input_path):
        print(f"❌ Input image not found: {input_path}")
        return 1

    try:
        generate_pdf(input_path, output_path)
    except ConverterError as e:
        print(f"❌ Conversion failed: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
