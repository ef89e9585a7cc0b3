from decimal import Decimal, ROUND_HALF_UP
from models.chart import Bucket, RateDetail
from models.dataset import Dataset, DailyRecord
import logging

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def round2(value: Decimal) -> float:
    """Round to 2 decimal places, halves away from zero."""
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def calculate_rate(visits: int | None, conversions: int | None) -> float | None:
    """
    Conversion rate in percent, rounded to 2 decimals.
    None visits means the variation had no exposure recorded (no data).
    """
    if visits is None:
        return None
    if visits == 0:
        return 0.0
    # exact decimal arithmetic so halves round the same way every time
    return round2(Decimal(conversions or 0) * 100 / Decimal(visits))


def rate_detail(visits: int | None, conversions: int | None) -> RateDetail | None:
    rate = calculate_rate(visits, conversions)
    if rate is None:
        return None
    return RateDetail(visits=visits, conversions=conversions or 0, rate=rate)


def calculate_day(dataset: Dataset, day: DailyRecord) -> Bucket:
    """Build the rate point of one day record, one RateDetail (or None) per variation name."""
    per_variation = {}
    for variation in dataset.variations:
        per_variation[variation.name] = rate_detail(
            day.visits.get(variation.key),
            day.conversions.get(variation.key),
        )

    return Bucket(key=day.date.isoformat(), start_date=day.date, per_variation=per_variation)


def calculate_rate_points(dataset: Dataset) -> list[Bucket]:
    points = [calculate_day(dataset, day) for day in dataset.days]
    logger.debug("calculated %d rate points for %d variations", len(points), len(dataset.variations))
    return points
