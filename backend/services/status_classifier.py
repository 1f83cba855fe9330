"""
Calibration Tracker - Status Classifier
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Five-state device status from the latest calibration
"""

from datetime import date, timedelta
from typing import Optional

from config import settings
from models.device import Device
from models.status import DeviceStatus, STATUS_RANK
from services.calibration_calculator import latest_calibration


def classify(device: Device, today: Optional[date] = None) -> DeviceStatus:
    """
    Derive a device's calibration status.

    Args:
        device: Device snapshot
        today: Reference date (defaults to the current local date)

    Returns:
        uncalibrated  - no calibration on record
        calibration-free - latest calibration has period 0
        overdue       - next-due date before today
        due-soon      - next-due date within the due-soon window (inclusive)
        valid         - otherwise
    """
    latest = latest_calibration(device)
    if latest is None:
        return DeviceStatus.UNCALIBRATED
    if latest.calibration_period_years == 0:
        return DeviceStatus.CALIBRATION_FREE

    next_due = latest.next_calibration_date
    if next_due is None:
        return DeviceStatus.VALID

    today = today or date.today()
    window_end = today + timedelta(days=settings.DUE_SOON_WINDOW_DAYS)

    if next_due < today:
        return DeviceStatus.OVERDUE
    if next_due <= window_end:
        return DeviceStatus.DUE_SOON
    return DeviceStatus.VALID


def status_rank(status: DeviceStatus) -> int:
    """Sort precedence: overdue < due-soon < uncalibrated < valid < calibration-free"""
    return STATUS_RANK[status]
