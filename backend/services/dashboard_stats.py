"""
Calibration Tracker - Dashboard Stats Builder
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Status tallies, due-this-month counter, chart buckets
"""

from collections import Counter
from datetime import date
from typing import Iterable, Optional

from models.device import Device
from models.status import ChartBucket, DashboardStats, DeviceStatus
from services.calibration_calculator import latest_next_due
from services.status_classifier import classify

# Fixed chart order
CHART_ORDER = (
    DeviceStatus.VALID,
    DeviceStatus.DUE_SOON,
    DeviceStatus.OVERDUE,
    DeviceStatus.UNCALIBRATED,
    DeviceStatus.CALIBRATION_FREE,
)


def count_due_this_month(devices: Iterable[Device], today: Optional[date] = None) -> int:
    """
    Devices whose latest next-due date is in the current calendar month and
    on or after today. Not the due-soon window: a due date 10 days out in next
    month is due-soon but not counted here.
    """
    today = today or date.today()
    count = 0
    for device in devices:
        next_due = latest_next_due(device)
        if next_due is None:
            continue
        if next_due.year == today.year and next_due.month == today.month and next_due >= today:
            count += 1
    return count


def build_chart_buckets(counts: dict, total: int) -> list:
    """Five buckets in fixed order; 0% everywhere when there are no devices"""
    buckets = []
    for status in CHART_ORDER:
        count = counts.get(status, 0)
        percentage = (count / total) * 100 if total > 0 else 0.0
        buckets.append(ChartBucket(status=status, count=count, percentage=percentage))
    return buckets


def build_stats(devices: Iterable[Device], today: Optional[date] = None) -> DashboardStats:
    """Dashboard counters for a device collection"""
    devices = list(devices)
    today = today or date.today()

    counts = Counter(classify(d, today) for d in devices)
    total = len(devices)

    return DashboardStats(
        total=total,
        counts_by_status=dict(counts),
        overdue_count=counts.get(DeviceStatus.OVERDUE, 0),
        due_soon_this_month_count=count_due_this_month(devices, today),
        chart_buckets=build_chart_buckets(counts, total),
    )
