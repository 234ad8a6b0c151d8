from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from cmyk_pdf import config
from cmyk_pdf.config import APP_ENV, CLIENT_URL, LOG_LEVEL, OUTPUT_FILENAME, ROOT_PATH, default_layout
from cmyk_pdf.errors import ConverterError, UploadMissing
from cmyk_pdf.pipeline import convert_upload

import logging
import time

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CMYK PDF Converter", root_path=ROOT_PATH)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[CLIENT_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms")
    return response


def error_body(message: str, detail: str = None):
    return {
        "success": False,
        "message": message,
        "error": detail if APP_ENV == "development" else None,
    }


@app.exception_handler(ConverterError)
async def converter_error_handler(request: Request, exc: ConverterError):
    if exc.status_code >= 500:
        logger.error(f"Error generating CMYK PDF: {exc.message}", exc_info=exc)
        message = "Error generating CMYK PDF"
    else:
        logger.warning(f"Rejected request to {request.url.path}: {exc.message}")
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content=error_body(message, exc.message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Server error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Server Error", str(exc)))


@app.get("/api/health")
async def health():
    return {"status": "ok", "message": "Server is running"}


@app.post("/convert-to-cmyk-pdf")
def convert_to_cmyk_pdf(image: UploadFile = File(None)):
    if image is None:
        raise UploadMissing("No image file uploaded.")

    logger.info(f"Converting upload '{image.filename}' ({image.content_type})")
    try:
        pdf_bytes = convert_upload(
            image.file,
            image.filename,
            default_layout(),
            scratch_root=config.SCRATCH_ROOT,
            max_bytes=config.MAX_UPLOAD_BYTES,
        )
    finally:
        image.file.close()

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={OUTPUT_FILENAME}"},
    )
