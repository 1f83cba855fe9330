"""Dashboard counters, due-this-month rule and chart buckets."""

from datetime import date

import pytest

from models.status import DeviceStatus
from services.dashboard_stats import CHART_ORDER, build_stats, count_due_this_month

TODAY = date(2024, 6, 15)


def test_empty_collection_has_five_zero_buckets():
    stats = build_stats([], TODAY)
    assert stats.total == 0
    assert stats.overdue_count == 0
    assert stats.due_soon_this_month_count == 0
    assert [b.status for b in stats.chart_buckets] == list(CHART_ORDER)
    assert all(b.count == 0 and b.percentage == 0.0 for b in stats.chart_buckets)


def test_counts_and_percentages(make_device):
    devices = [
        make_device(history=[(date(2022, 1, 1), 1)]),   # overdue
        make_device(history=[(date(2022, 2, 1), 1)]),   # overdue
        make_device(history=[(date(2024, 1, 1), 1)]),   # valid
        make_device(),                                  # uncalibrated
    ]
    stats = build_stats(devices, TODAY)
    assert stats.total == 4
    assert stats.overdue_count == 2
    assert stats.counts_by_status[DeviceStatus.OVERDUE] == 2
    assert stats.counts_by_status[DeviceStatus.VALID] == 1

    buckets = {b.status: b for b in stats.chart_buckets}
    assert buckets[DeviceStatus.OVERDUE].percentage == pytest.approx(50.0)
    assert buckets[DeviceStatus.UNCALIBRATED].percentage == pytest.approx(25.0)
    assert buckets[DeviceStatus.CALIBRATION_FREE].count == 0
    assert sum(b.percentage for b in stats.chart_buckets) == pytest.approx(100.0)


def test_due_this_month_is_calendar_month_not_window(make_device):
    devices = [
        make_device(history=[(date(2023, 6, 20), 1)]),  # due 2024-06-20: counted
        make_device(history=[(date(2023, 6, 15), 1)]),  # due today: counted
        make_device(history=[(date(2023, 6, 10), 1)]),  # due 2024-06-10, already past
        make_device(history=[(date(2023, 7, 5), 1)]),   # due-soon but next month
        make_device(history=[(date(2024, 6, 1), 0)]),   # calibration-free
    ]
    assert count_due_this_month(devices, TODAY) == 2
    stats = build_stats(devices, TODAY)
    assert stats.due_soon_this_month_count == 2
    assert stats.counts_by_status[DeviceStatus.DUE_SOON] == 3
