from collections.abc import Iterable, Sequence
from models.chart import Bucket
from services.errors import EmptyVisibilitySetError
import logging

logger = logging.getLogger(__name__)


def has_visible_data(bucket: Bucket, visible: Iterable[str]) -> bool:
    return any(bucket.per_variation.get(name) is not None for name in visible)


def filter_visible(buckets: Sequence[Bucket], visible: Iterable[str]) -> list[Bucket]:
    """
    Keep only the buckets where at least one visible variation has data.
    Dropped buckets are removed entirely rather than rendered as gaps.
    """
    visible = frozenset(visible)
    if not visible:
        raise EmptyVisibilitySetError("at least one variation must stay visible")

    kept = [bucket for bucket in buckets if has_visible_data(bucket, visible)]
    logger.debug("visibility filter kept %d of %d buckets", len(kept), len(buckets))
    return kept
