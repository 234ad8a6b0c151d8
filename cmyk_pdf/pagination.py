import logging
import math

from .errors import PlanningError
from .models import LayoutOptions, PagePlan, PageSlice

logger = logging.getLogger(__name__)


def compute_scale(width: int, height: int, options: LayoutOptions) -> float:
    """Points per source pixel for the configured scale policy."""
    if width <= 0 or height <= 0:
        raise PlanningError(f"Image has no area: {width}x{height}")
    if options.scale_policy == "fit_page":
        return min(options.page_width / width, options.page_height / height)
    return options.page_width / width


def plan_pages(width: int, height: int, options: LayoutOptions) -> PagePlan:
    """
    Split an image of width x height pixels into page-sized horizontal slices.

    Every page shows the full image width at the same scale. A page holds
    floor((page_height - bottom_margin) / scale) pixel rows; the last slice
    takes whatever rows are left. Slices cover [0, height) with no gaps.
    """
    scale = compute_scale(width, height, options)
    usable_height_pt = options.page_height - options.bottom_margin
    visible_height_px = math.floor(usable_height_pt / scale)
    if visible_height_px <= 0:
        raise PlanningError(
            f"No pixel rows fit on a page (usable height {usable_height_pt}pt, scale {scale:.4f})"
        )

    total_pages = math.ceil(height / visible_height_px)
    slices = []
    for i in range(total_pages):
        top = i * visible_height_px
        slices.append(PageSlice(index=i, top=top, height=min(visible_height_px, height - top)))

    logger.info(
        f"Planned {total_pages} page(s) for {width}x{height}px "
        f"(scale {scale:.4f}, {visible_height_px}px per page)"
    )
    return PagePlan(
        scale=scale,
        visible_height_px=visible_height_px,
        image_width=width,
        image_height=height,
        slices=slices,
    )
