from collections.abc import Iterable, Sequence
from decimal import Decimal
from fractions import Fraction
from models.chart import Bucket, TooltipEntry, color_for
from models.dataset import Variation
from services.rates import round2
import logging

logger = logging.getLogger(__name__)


def _find_index(buckets: Sequence[Bucket], target_key: str) -> int | None:
    for index, bucket in enumerate(buckets):
        if bucket.key == target_key:
            return index
    return None


def _exact(rate: float) -> Fraction:
    return Fraction(Decimal(str(rate)))


def interpolate(buckets: Sequence[Bucket], name: str, target_index: int) -> Fraction | None:
    """
    Linearly interpolate a variation's rate at target_index from the nearest
    non-null buckets on each side. None when either side has no data.
    The result is exact; rounding happens only when the entry is displayed.
    """
    prev_index = next(
        (i for i in range(target_index - 1, -1, -1) if buckets[i].rate_of(name) is not None),
        None,
    )
    next_index = next(
        (i for i in range(target_index + 1, len(buckets)) if buckets[i].rate_of(name) is not None),
        None,
    )
    if prev_index is None or next_index is None:
        return None

    prev_value = _exact(buckets[prev_index].rate_of(name))
    next_value = _exact(buckets[next_index].rate_of(name))
    return prev_value + (next_value - prev_value) * (target_index - prev_index) / (next_index - prev_index)


def display_rate(value: Fraction) -> float:
    return round2(Decimal(value.numerator) / Decimal(value.denominator))


def rank_entries(resolved: list[tuple[Fraction, TooltipEntry]]) -> list[TooltipEntry]:
    """
    Sort (exact rate, entry) pairs highest first and flag every entry tied at a
    positive maximum. Ties are decided on the exact rates, not the rounded ones.
    """
    ranked = sorted(resolved, key=lambda pair: pair[0], reverse=True)
    max_rate = ranked[0][0] if ranked else 0
    if max_rate <= 0:
        return [entry for _, entry in ranked]
    return [entry.model_copy(update={"is_winner": exact == max_rate}) for exact, entry in ranked]


def resolve_entries(
    buckets: Sequence[Bucket],
    target_key: str,
    variations: list[Variation],
    visible: Iterable[str],
) -> list[TooltipEntry]:
    """
    Resolve the tooltip rows for the bucket labelled target_key.
    buckets must be the full sequence for the view mode, before visibility filtering and zoom.
    """
    target_index = _find_index(buckets, target_key)
    if target_index is None:
        logger.debug("tooltip target %s not found among %d buckets", target_key, len(buckets))
        return []

    visible = set(visible)
    target = buckets[target_index]
    entries = []

    for index, variation in enumerate(variations):
        name = variation.name
        if name not in visible:
            continue

        detail = target.per_variation.get(name)
        if detail is not None:
            entries.append((_exact(detail.rate), TooltipEntry(
                variation_name=name,
                color_index=index,
                color=color_for(index),
                rate=detail.rate,
                visits=detail.visits,
                conversions=detail.conversions,
            )))
            continue

        value = interpolate(buckets, name, target_index)
        if value is None:
            # no data on one side of the gap: leave the variation out
            continue
        entries.append((value, TooltipEntry(
            variation_name=name,
            color_index=index,
            color=color_for(index),
            rate=display_rate(value),
            interpolated=True,
        )))

    return rank_entries(entries)
