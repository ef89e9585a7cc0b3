from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from enum import Enum

# Line colours, assigned by variation position in the dataset.
PALETTE = ["#8884d8", "#82ca9d", "#ffc658", "#ff7300"]


def color_for(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


class ViewMode(str, Enum):
    DAY = "day"
    WEEK = "week"


class RateDetail(BaseModel):
    """Visits, conversions and the rounded conversion rate (percent) behind one chart point."""
    model_config = ConfigDict(frozen=True)

    visits: int
    conversions: int
    rate: float


class Bucket(BaseModel):
    """One x-axis point: a single day, or a week aggregate labelled "Week of <start>"."""
    model_config = ConfigDict(frozen=True)

    key: str
    start_date: date
    day_count: int = 1
    # None means the variation has no data in this bucket
    per_variation: dict[str, RateDetail | None]

    def rate_of(self, name: str) -> float | None:
        detail = self.per_variation.get(name)
        return detail.rate if detail is not None else None


class TooltipEntry(BaseModel):
    """Resolved value of one visible variation at a hovered bucket."""
    variation_name: str
    color_index: int
    color: str
    rate: float
    is_winner: bool = False
    interpolated: bool = False
    # Only set when the rate was read directly from the bucket
    visits: int | None = None
    conversions: int | None = None


class VariationResponse(BaseModel):
    """Schema returned by GET /chart/variations."""
    key: str
    name: str
    color_index: int
    color: str


class DisplayWindowResponse(BaseModel):
    """Schema returned by the chart window endpoints."""
    view_mode: ViewMode
    zoom_level: int
    visible: list[str]
    buckets: list[Bucket]


class TooltipResponse(BaseModel):
    """Schema returned by the tooltip endpoints."""
    key: str
    view_mode: ViewMode
    entries: list[TooltipEntry] = Field(default_factory=list)
