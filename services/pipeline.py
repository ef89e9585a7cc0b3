from collections.abc import Iterable
from functools import lru_cache
from models.chart import Bucket, TooltipEntry, ViewMode
from models.dataset import Dataset
from services.aggregation import aggregate
from services.errors import EmptyVisibilitySetError, UnknownVariationError
from services.tooltip import resolve_entries
from services.visibility import filter_visible
from services.zoom import DEFAULT_ZOOM, apply_zoom
import logging

logger = logging.getLogger(__name__)

# Upper bounds for the memoized stages whose keys come from the caller
FILTERED_CACHE_SIZE = 64
WINDOW_CACHE_SIZE = 128
TOOLTIP_CACHE_SIZE = 256


class ChartPipeline:
    """
    Derivation chain for one dataset: buckets -> filtered -> windowed, plus tooltip lookups.
    Every stage is memoized on its own inputs, in bounded LRU caches, and returns tuples
    so a caller cannot alter what later calls get back. The dataset is treated as
    immutable, so a changed dataset needs a new pipeline.
    """

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self._names = frozenset(dataset.variation_names())
        # one entry per view mode
        self._buckets: dict[ViewMode, tuple[Bucket, ...]] = {}
        self._filtered = lru_cache(maxsize=FILTERED_CACHE_SIZE)(self._compute_filtered)
        self._windows = lru_cache(maxsize=WINDOW_CACHE_SIZE)(self._compute_window)
        self._tooltips = lru_cache(maxsize=TOOLTIP_CACHE_SIZE)(self._compute_tooltip)

    def _visible_key(self, visible: Iterable[str]) -> frozenset[str]:
        visible = frozenset(visible)
        if not visible:
            raise EmptyVisibilitySetError("at least one variation must stay visible")
        unknown = visible - self._names
        if unknown:
            raise UnknownVariationError(f"unknown variations: {', '.join(sorted(unknown))}")
        return visible

    def _compute_filtered(self, view_mode: ViewMode, visible: frozenset[str]) -> tuple[Bucket, ...]:
        return tuple(filter_visible(self.buckets(view_mode), visible))

    def _compute_window(self, view_mode: ViewMode, visible: frozenset[str], zoom_level: int) -> tuple[Bucket, ...]:
        return tuple(apply_zoom(self._filtered(view_mode, visible), zoom_level))

    def _compute_tooltip(self, view_mode: ViewMode, target_key: str, visible: frozenset[str]) -> tuple[TooltipEntry, ...]:
        return tuple(resolve_entries(self.buckets(view_mode), target_key, self.dataset.variations, visible))

    def buckets(self, view_mode: ViewMode) -> tuple[Bucket, ...]:
        view_mode = ViewMode(view_mode)
        if view_mode not in self._buckets:
            logger.debug("bucket cache miss for view mode %s", view_mode.value)
            self._buckets[view_mode] = tuple(aggregate(self.dataset, view_mode))
        return self._buckets[view_mode]

    def filtered(self, view_mode: ViewMode, visible: Iterable[str]) -> tuple[Bucket, ...]:
        return self._filtered(ViewMode(view_mode), self._visible_key(visible))

    def display_window(self, view_mode: ViewMode, visible: Iterable[str], zoom_level: int = DEFAULT_ZOOM) -> tuple[Bucket, ...]:
        return self._windows(ViewMode(view_mode), self._visible_key(visible), zoom_level)

    def tooltip(self, view_mode: ViewMode, target_key: str, visible: Iterable[str]) -> tuple[TooltipEntry, ...]:
        return self._tooltips(ViewMode(view_mode), target_key, self._visible_key(visible))

    def cache_info(self) -> dict:
        return {
            "filtered": self._filtered.cache_info(),
            "windows": self._windows.cache_info(),
            "tooltips": self._tooltips.cache_info(),
        }


def derive_display_window(
    dataset: Dataset,
    view_mode: ViewMode,
    visible: Iterable[str],
    zoom_level: int = DEFAULT_ZOOM,
) -> tuple[Bucket, ...]:
    """Buckets to draw for the given view mode, visible variations and zoom level."""
    return ChartPipeline(dataset).display_window(view_mode, visible, zoom_level)


def resolve_tooltip(
    dataset: Dataset,
    view_mode: ViewMode,
    target_key: str,
    visible: Iterable[str],
) -> tuple[TooltipEntry, ...]:
    """Ranked tooltip rows for the bucket labelled target_key."""
    return ChartPipeline(dataset).tooltip(view_mode, target_key, visible)
