from pydantic import BaseModel


class ThumbnailAnalysis(BaseModel):
    """Black bar widths as percentages of the thumbnail width."""

    left_bar: float
    right_bar: float
    total_percent: float
