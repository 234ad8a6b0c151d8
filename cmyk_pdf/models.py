from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class LayoutOptions(BaseModel):
    """Page geometry and placement policy shared by planner and renderer."""

    page_width: float = Field(595.28, gt=0)
    page_height: float = Field(841.89, gt=0)
    bottom_margin: float = Field(20.0, ge=0)
    scale_policy: Literal["fit_width", "fit_page"] = "fit_width"
    horizontal_align: Literal["left", "center"] = "left"
    # False places page 0 flush to the bottom edge with no margin below it
    first_page_margin: bool = True
    jpeg_quality: int = Field(95, ge=1, le=100)
    render_workers: int = Field(1, ge=1)


class ConvertedImage(BaseModel):
    path: str
    width: int
    height: int
    mode: str = "CMYK"
    dpi: Optional[Tuple[float, float]] = None


class PageSlice(BaseModel):
    index: int
    top: int
    height: int

    @property
    def bottom(self) -> int:
        return self.top + self.height


class PagePlan(BaseModel):
    scale: float
    visible_height_px: int
    image_width: int
    image_height: int
    slices: List[PageSlice]

    @property
    def total_pages(self) -> int:
        return len(self.slices)


class PagePlacement(BaseModel):
    """Where a slice lands on its page, in points from the bottom-left corner."""

    x: float
    y: float
    width: float
    height: float
