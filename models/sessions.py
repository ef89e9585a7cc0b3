from pydantic import BaseModel, Field
from enum import Enum
from models.chart import ViewMode

# --- Pydantic Models for chart session state ---

class LineStyle(str, Enum):
    MONOTONE = "monotone"
    LINEAR = "linear"
    STEP = "step"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ChartSession(BaseModel):
    """Chart controls owned by one viewer: visible variations, view mode, zoom, line style and theme."""
    id: str
    visible: list[str] = Field(..., min_length=1, description="Visible variation names, kept in dataset order. Never empty.")
    view_mode: ViewMode = ViewMode.DAY
    zoom_level: int = 100
    line_style: LineStyle = LineStyle.MONOTONE
    theme: Theme = Theme.LIGHT


class ViewModeUpdate(BaseModel):
    view_mode: ViewMode


class ZoomUpdate(BaseModel):
    zoom_level: int = Field(..., description="Zoom percentage, 50 to 200 in steps of 25.")


class LineStyleUpdate(BaseModel):
    line_style: LineStyle


class ThemeUpdate(BaseModel):
    theme: Theme
