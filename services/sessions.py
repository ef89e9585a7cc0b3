from models.chart import ViewMode
from models.dataset import Dataset
from models.sessions import ChartSession, LineStyle, Theme
from services.cache import CacheClient
from services.errors import (
    EmptyVisibilitySetError,
    InvalidZoomLevelError,
    SessionNotFoundError,
    UnknownVariationError,
)
from services.zoom import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_LEVELS, ZOOM_STEP
import logging
import uuid

logger = logging.getLogger(__name__)


# --- Session Lifecycle ---
def create_session(cache: CacheClient, dataset: Dataset) -> ChartSession:
    """Creates a chart session with every variation visible and default controls."""
    session = ChartSession(
        id=str(uuid.uuid4()),
        visible=dataset.variation_names(),
        view_mode=ViewMode.DAY,
        zoom_level=DEFAULT_ZOOM,
        line_style=LineStyle.MONOTONE,
        theme=Theme.LIGHT,
    )
    cache.set_session(session)
    logger.info("create chart session %s with %d visible variations", session.id, len(session.visible))
    return session


def get_session(cache: CacheClient, session_id: str) -> ChartSession:
    session = cache.get_session(session_id)
    if session is None:
        logger.info("chart session %s not found", session_id)
        raise SessionNotFoundError(f"chart session {session_id} not found")
    return session


def save_session(cache: CacheClient, session: ChartSession) -> ChartSession:
    cache.set_session(session)
    return session


# --- State Transitions ---
# Each transition returns a new ChartSession; the input session is never modified.

def toggle_variation(session: ChartSession, dataset: Dataset, name: str) -> ChartSession:
    """
    Show a hidden variation or hide a visible one.
    Hiding the last visible variation is rejected and the session stays as it was.
    """
    names = dataset.variation_names()
    if name not in names:
        raise UnknownVariationError(f"unknown variation: {name}")

    visible = set(session.visible)
    if name in visible:
        if len(visible) == 1:
            logger.warning("session %s: refusing to hide last visible variation %s", session.id, name)
            raise EmptyVisibilitySetError(f"{name} is the last visible variation")
        visible.discard(name)
    else:
        visible.add(name)

    # keep dataset order so palette indexes stay stable
    ordered = [n for n in names if n in visible]
    logger.debug("session %s: visible variations now %s", session.id, ordered)
    return session.model_copy(update={"visible": ordered})


def set_view_mode(session: ChartSession, view_mode: ViewMode) -> ChartSession:
    return session.model_copy(update={"view_mode": ViewMode(view_mode)})


def set_zoom_level(session: ChartSession, zoom_level: int) -> ChartSession:
    if zoom_level not in ZOOM_LEVELS:
        raise InvalidZoomLevelError(
            f"zoom level must be between {MIN_ZOOM} and {MAX_ZOOM} in steps of {ZOOM_STEP}, got {zoom_level}"
        )
    return session.model_copy(update={"zoom_level": zoom_level})


def zoom_in(session: ChartSession) -> ChartSession:
    return session.model_copy(update={"zoom_level": min(session.zoom_level + ZOOM_STEP, MAX_ZOOM)})


def zoom_out(session: ChartSession) -> ChartSession:
    return session.model_copy(update={"zoom_level": max(session.zoom_level - ZOOM_STEP, MIN_ZOOM)})


def reset_zoom(session: ChartSession) -> ChartSession:
    return session.model_copy(update={"zoom_level": DEFAULT_ZOOM})


def set_line_style(session: ChartSession, line_style: LineStyle) -> ChartSession:
    return session.model_copy(update={"line_style": LineStyle(line_style)})


def set_theme(session: ChartSession, theme: Theme) -> ChartSession:
    return session.model_copy(update={"theme": Theme(theme)})
