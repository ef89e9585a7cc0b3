from datetime import date
from conftest import make_dataset
from models.chart import ViewMode
from services.aggregation import aggregate, week_label


def test_day_mode_is_one_bucket_per_record():
    dataset = make_dataset(date(2025, 1, 1), {"0": [(10, 1)] * 4})
    buckets = aggregate(dataset, ViewMode.DAY)
    assert [b.key for b in buckets] == ["2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04"]


def test_week_rate_is_sum_then_divide():
    # 2025-01-06 is a Monday
    dataset = make_dataset(date(2025, 1, 6), {"0": [(10, 5), (90, 9)]})

    (week,) = aggregate(dataset, ViewMode.WEEK)

    detail = week.per_variation["V0"]
    assert detail.visits == 100
    assert detail.conversions == 14
    assert detail.rate == 14.0


def test_leading_partial_week_starts_on_first_record():
    # 2025-01-01 is a Wednesday: Wed..Sun, then a bucket opening on Monday
    dataset = make_dataset(date(2025, 1, 1), {"0": [(10, 1)] * 8})

    weeks = aggregate(dataset, ViewMode.WEEK)

    assert len(weeks) == 2
    assert weeks[0].key == "Week of 2025-01-01"
    assert weeks[0].day_count == 5
    assert weeks[0].per_variation["V0"].rate == 10.0
    assert weeks[1].key == "Week of 2025-01-06"
    assert weeks[1].start_date == date(2025, 1, 6)
    assert weeks[1].day_count == 3
    assert weeks[1].per_variation["V0"].rate == 10.0


def test_absent_days_contribute_nothing():
    dataset = make_dataset(date(2025, 1, 6), {"0": [(10, 1)] * 3, "1": [None, (20, 4), None]})

    (week,) = aggregate(dataset, ViewMode.WEEK)

    assert week.per_variation["V1"].visits == 20
    assert week.per_variation["V1"].rate == 20.0


def test_variation_absent_all_week_is_null():
    dataset = make_dataset(
        date(2025, 1, 6),
        {"0": [(10, 1)] * 10, "1": [None] * 7 + [(10, 2)] * 3},
    )

    weeks = aggregate(dataset, ViewMode.WEEK)

    assert weeks[0].per_variation["V1"] is None
    assert weeks[1].per_variation["V1"].rate == 20.0


def test_zero_visits_all_week_is_null():
    dataset = make_dataset(date(2025, 1, 6), {"0": [(0, 0), (0, None)]})
    (week,) = aggregate(dataset, ViewMode.WEEK)
    assert week.per_variation["V0"] is None


def test_last_week_is_always_flushed():
    dataset = make_dataset(date(2025, 1, 13), {"0": [(10, 1)] * 7 + [(10, 3)]})

    weeks = aggregate(dataset, ViewMode.WEEK)

    assert [w.key for w in weeks] == ["Week of 2025-01-13", "Week of 2025-01-20"]
    assert weeks[-1].day_count == 1
    assert weeks[-1].per_variation["V0"].rate == 30.0


def test_empty_dataset_has_no_buckets():
    dataset = make_dataset(date(2025, 1, 6), {"0": []})
    assert aggregate(dataset, ViewMode.WEEK) == []
    assert aggregate(dataset, ViewMode.DAY) == []


def test_week_label():
    assert week_label(date(2024, 12, 30)) == "Week of 2024-12-30"
