from collections.abc import Sequence
from models.chart import Bucket
from services.errors import InvalidZoomLevelError
import logging

logger = logging.getLogger(__name__)

# --- Zoom control domain (percent) ---
MIN_ZOOM = 50
MAX_ZOOM = 200
ZOOM_STEP = 25
DEFAULT_ZOOM = 100
ZOOM_LEVELS = tuple(range(MIN_ZOOM, MAX_ZOOM + 1, ZOOM_STEP))

# A zoomed window never shrinks below this many buckets
MIN_WINDOW = 2


def window_size(total: int, zoom_level: int) -> int:
    if zoom_level <= 0:
        raise InvalidZoomLevelError(f"zoom level must be positive, got {zoom_level}")
    return max(total * 100 // zoom_level, MIN_WINDOW)


def apply_zoom(buckets: Sequence[Bucket], zoom_level: int) -> Sequence[Bucket]:
    """Return the trailing (most recent) slice of buckets that fits the zoom level."""
    if zoom_level == DEFAULT_ZOOM:
        return buckets

    size = window_size(len(buckets), zoom_level)
    start = max(0, len(buckets) - size)
    logger.debug("zoom %d%%: showing %d of %d buckets", zoom_level, len(buckets) - start, len(buckets))
    return buckets[start:]
