from datetime import date
from models.chart import Bucket, ViewMode
from models.dataset import Dataset
from services.rates import calculate_rate_points, rate_detail
import logging

logger = logging.getLogger(__name__)

MONDAY = 0


def week_label(start: date) -> str:
    return f"Week of {start.isoformat()}"


class _WeekAccumulator:
    """Running visit/conversion sums of the week bucket currently open."""

    def __init__(self, start: date):
        self.start = start
        self.day_count = 0
        self.visits: dict[str, int] = {}
        self.conversions: dict[str, int] = {}

    def add(self, dataset: Dataset, day):
        self.day_count += 1
        for variation in dataset.variations:
            visits = day.visits.get(variation.key)
            # days without a visits entry contribute nothing, not zero
            if visits is None:
                continue
            name = variation.name
            self.visits[name] = self.visits.get(name, 0) + visits
            self.conversions[name] = self.conversions.get(name, 0) + day.conversions.get(variation.key, 0)

    def flush(self, dataset: Dataset) -> Bucket:
        per_variation = {}
        for variation in dataset.variations:
            name = variation.name
            visits = self.visits.get(name, 0)
            if visits > 0:
                per_variation[name] = rate_detail(visits, self.conversions.get(name, 0))
            else:
                per_variation[name] = None

        return Bucket(
            key=week_label(self.start),
            start_date=self.start,
            day_count=self.day_count,
            per_variation=per_variation,
        )


def aggregate_weeks(dataset: Dataset) -> list[Bucket]:
    """
    Group day records into week buckets.
    A bucket opens on every Monday, and on the first record whatever its weekday,
    so the leading partial week is labelled with the dataset's first date.
    Weekly rates are computed from summed counts, never by averaging daily rates.
    """
    weeks: list[Bucket] = []
    current: _WeekAccumulator | None = None

    for day in dataset.days:
        if current is None or day.date.weekday() == MONDAY:
            if current is not None:
                weeks.append(current.flush(dataset))
            current = _WeekAccumulator(start=day.date)
        current.add(dataset, day)

    # the last open week is always emitted
    if current is not None:
        weeks.append(current.flush(dataset))

    logger.debug("aggregated %d days into %d weeks", len(dataset.days), len(weeks))
    return weeks


def aggregate(dataset: Dataset, view_mode: ViewMode) -> list[Bucket]:
    """Turn the dataset into display buckets for the given view mode."""
    if view_mode == ViewMode.WEEK:
        return aggregate_weeks(dataset)
    return calculate_rate_points(dataset)
