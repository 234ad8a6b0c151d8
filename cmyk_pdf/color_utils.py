import logging
import os

from PIL import Image

from .errors import ConversionError
from .models import ConvertedImage

logger = logging.getLogger(__name__)

_ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


def _flatten(img: Image.Image) -> Image.Image:
    """Drop transparency onto a white background, leaving an RGB or CMYK image."""
    if img.mode == "CMYK":
        return img.copy()
    if img.mode == "P" and "transparency" in img.info:
        img = img.convert("RGBA")
    if img.mode in _ALPHA_MODES:
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, "white")
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return img.convert("RGB")


def convert_to_cmyk(source_path: str, dest_path: str) -> ConvertedImage:
    """
    Re-encode the image at source_path as a CMYK TIFF at dest_path.
    Resolution and EXIF data carry over from the source; pixel size is unchanged.
    """
    try:
        with Image.open(source_path) as src:
            src.load()
            info = dict(src.info)
            logger.info(f"Source image {src.format} {src.mode} {src.width}x{src.height}")
            cmyk = _flatten(src).convert("CMYK")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ConversionError(f"Could not read image for CMYK conversion: {e}") from e

    save_kwargs = {"compression": "tiff_lzw"}
    dpi = info.get("dpi")
    if dpi:
        save_kwargs["dpi"] = dpi
    if info.get("exif"):
        save_kwargs["exif"] = info["exif"]

    width, height = cmyk.size
    try:
        cmyk.save(dest_path, format="TIFF", **save_kwargs)
    except (OSError, ValueError) as e:
        if os.path.exists(dest_path):
            os.remove(dest_path)
        raise ConversionError(f"Could not write CMYK image: {e}") from e
    finally:
        cmyk.close()

    logger.info(f"CMYK image saved: {dest_path} ({width}x{height}, dpi={dpi})")
    return ConvertedImage(
        path=dest_path,
        width=width,
        height=height,
        mode="CMYK",
        dpi=tuple(float(d) for d in dpi) if dpi else None,
    )
