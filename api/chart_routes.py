from fastapi import APIRouter, Query

from models.chart import (
    DisplayWindowResponse,
    TooltipResponse,
    VariationResponse,
    ViewMode,
    color_for,
)
from services.errors import ChartError
from services.pipeline import ChartPipeline
from services.zoom import DEFAULT_ZOOM
from api.depends import CLIENT_AUTH, PIPELINE, http_error

import logging

logger = logging.getLogger(__name__)

# Stateless chart queries; every parameter travels with the request
chart_router = APIRouter(
    prefix="/chart",
    tags=["chart"],
    dependencies=[CLIENT_AUTH],
)


def _visible_or_all(pipeline: ChartPipeline, visible: list[str] | None) -> list[str]:
    return visible if visible else pipeline.dataset.variation_names()


# GET /chart/variations
@chart_router.get("/variations", response_model=list[VariationResponse])
def list_variations_route(pipeline: ChartPipeline = PIPELINE):
    """List the dataset's variations in display order with their palette colour."""
    return [
        VariationResponse(key=v.key, name=v.name, color_index=i, color=color_for(i))
        for i, v in enumerate(pipeline.dataset.variations)
    ]


# GET /chart/window
@chart_router.get("/window", response_model=DisplayWindowResponse)
def get_display_window_route(
    view_mode: ViewMode = ViewMode.DAY,
    zoom_level: int = DEFAULT_ZOOM,
    visible: list[str] | None = Query(None),    # defaults to every variation
    pipeline: ChartPipeline = PIPELINE,
):
    """Buckets to draw for the requested view mode, visible variations and zoom level."""
    visible = _visible_or_all(pipeline, visible)
    try:
        buckets = pipeline.display_window(view_mode, visible, zoom_level)
    except ChartError as e:
        logger.info("display window rejected: %s", str(e))
        raise http_error(e)

    return DisplayWindowResponse(view_mode=view_mode, zoom_level=zoom_level, visible=visible, buckets=buckets)


# GET /chart/tooltip
@chart_router.get("/tooltip", response_model=TooltipResponse)
def get_tooltip_route(
    key: str,                                   # day ISO date or "Week of YYYY-MM-DD"
    view_mode: ViewMode = ViewMode.DAY,
    visible: list[str] | None = Query(None),
    pipeline: ChartPipeline = PIPELINE,
):
    """Ranked tooltip rows for one bucket, interpolating gaps where both neighbours have data."""
    visible = _visible_or_all(pipeline, visible)
    try:
        entries = pipeline.tooltip(view_mode, key, visible)
    except ChartError as e:
        logger.info("tooltip rejected: %s", str(e))
        raise http_error(e)

    return TooltipResponse(key=key, view_mode=view_mode, entries=entries)
