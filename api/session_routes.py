from fastapi import APIRouter, status

from models.chart import DisplayWindowResponse, TooltipResponse
from models.sessions import ChartSession, LineStyleUpdate, ThemeUpdate, ViewModeUpdate, ZoomUpdate
from services import sessions
from services.cache import CacheClient
from services.errors import ChartError
from services.pipeline import ChartPipeline
from api.depends import CACHE_CLIENT, CLIENT_AUTH, PIPELINE, http_error

import logging

logger = logging.getLogger(__name__)

# Chart state owned by the server: each session remembers its own controls
session_router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    dependencies=[CLIENT_AUTH],
)


def _load(cache: CacheClient, session_id: str) -> ChartSession:
    try:
        return sessions.get_session(cache, session_id)
    except ChartError as e:
        raise http_error(e)


def _apply(cache: CacheClient, session_id: str, transition, *args) -> ChartSession:
    """Run a state transition and store the result; on a rejected transition the stored state is untouched."""
    session = _load(cache, session_id)
    try:
        updated = transition(session, *args)
    except ChartError as e:
        logger.info("session %s: transition %s rejected: %s", session_id, transition.__name__, str(e))
        raise http_error(e)
    return sessions.save_session(cache, updated)


# POST /sessions
@session_router.post("", response_model=ChartSession, status_code=status.HTTP_201_CREATED)
def create_session_route(cache: CacheClient = CACHE_CLIENT, pipeline: ChartPipeline = PIPELINE):
    """Start a chart session: all variations visible, daily view, 100% zoom."""
    return sessions.create_session(cache, pipeline.dataset)


# GET /sessions/{session_id}
@session_router.get("/{session_id}", response_model=ChartSession)
def get_session_route(session_id: str, cache: CacheClient = CACHE_CLIENT):
    return _load(cache, session_id)


# POST /sessions/{session_id}/variations/{name}/toggle
@session_router.post("/{session_id}/variations/{name}/toggle", response_model=ChartSession)
def toggle_variation_route(
    session_id: str,
    name: str,
    cache: CacheClient = CACHE_CLIENT,
    pipeline: ChartPipeline = PIPELINE,
):
    """Show or hide a variation. Hiding the last visible one answers 409."""
    return _apply(cache, session_id, sessions.toggle_variation, pipeline.dataset, name)


# PUT /sessions/{session_id}/view-mode
@session_router.put("/{session_id}/view-mode", response_model=ChartSession)
def set_view_mode_route(session_id: str, body: ViewModeUpdate, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.set_view_mode, body.view_mode)


# PUT /sessions/{session_id}/zoom
@session_router.put("/{session_id}/zoom", response_model=ChartSession)
def set_zoom_route(session_id: str, body: ZoomUpdate, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.set_zoom_level, body.zoom_level)


@session_router.post("/{session_id}/zoom/in", response_model=ChartSession)
def zoom_in_route(session_id: str, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.zoom_in)


@session_router.post("/{session_id}/zoom/out", response_model=ChartSession)
def zoom_out_route(session_id: str, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.zoom_out)


@session_router.post("/{session_id}/zoom/reset", response_model=ChartSession)
def reset_zoom_route(session_id: str, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.reset_zoom)


# PUT /sessions/{session_id}/line-style
@session_router.put("/{session_id}/line-style", response_model=ChartSession)
def set_line_style_route(session_id: str, body: LineStyleUpdate, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.set_line_style, body.line_style)


# PUT /sessions/{session_id}/theme
@session_router.put("/{session_id}/theme", response_model=ChartSession)
def set_theme_route(session_id: str, body: ThemeUpdate, cache: CacheClient = CACHE_CLIENT):
    return _apply(cache, session_id, sessions.set_theme, body.theme)


# GET /sessions/{session_id}/window
@session_router.get("/{session_id}/window", response_model=DisplayWindowResponse)
def get_session_window_route(
    session_id: str,
    cache: CacheClient = CACHE_CLIENT,
    pipeline: ChartPipeline = PIPELINE,
):
    """The display window for the session's current controls."""
    session = _load(cache, session_id)
    try:
        buckets = pipeline.display_window(session.view_mode, session.visible, session.zoom_level)
    except ChartError as e:
        raise http_error(e)

    return DisplayWindowResponse(
        view_mode=session.view_mode,
        zoom_level=session.zoom_level,
        visible=session.visible,
        buckets=buckets,
    )


# GET /sessions/{session_id}/tooltip?key=
@session_router.get("/{session_id}/tooltip", response_model=TooltipResponse)
def get_session_tooltip_route(
    session_id: str,
    key: str,
    cache: CacheClient = CACHE_CLIENT,
    pipeline: ChartPipeline = PIPELINE,
):
    session = _load(cache, session_id)
    try:
        entries = pipeline.tooltip(session.view_mode, key, session.visible)
    except ChartError as e:
        raise http_error(e)

    return TooltipResponse(key=key, view_mode=session.view_mode, entries=entries)
