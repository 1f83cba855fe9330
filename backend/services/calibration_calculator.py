"""
Calibration Tracker - Calibration Calculator
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Next-due computation and history helpers

Pure date arithmetic over calibration history. No I/O, no clock access
other than what callers pass in.
"""

from datetime import date
from typing import Optional, List, TYPE_CHECKING

from services.translations import translate, format_date

if TYPE_CHECKING:
    from models.calibration import Calibration
    from models.device import Device


def add_years(source: date, years: int) -> date:
    """
    Advance a date by whole years, preserving month and day.

    Feb 29 into a non-leap target year rolls over to Mar 1, the same result
    a calendar overflow (Feb 29 -> "Feb 29" of a 365-day year) gives.
    """
    try:
        return source.replace(year=source.year + years)
    except ValueError:
        return date(source.year + years, 3, 1)


def compute_next_due(calibration_date: date, period_years: int) -> Optional[date]:
    """Next-due date for a calibration, or None when the period is 0 (calibration-free)."""
    if period_years < 0:
        raise ValueError(f"Calibration period must be >= 0, got {period_years}")
    if period_years == 0:
        return None
    return add_years(calibration_date, period_years)


def sorted_history(device: "Device") -> List["Calibration"]:
    """Calibration history newest first; equal dates keep history order."""
    return sorted(
        device.calibration_history,
        key=lambda cal: cal.calibration_date,
        reverse=True,
    )


def latest_calibration(device: "Device") -> Optional["Calibration"]:
    """Latest calibration record by date, None when the device was never calibrated."""
    history = sorted_history(device)
    return history[0] if history else None


def latest_next_due(device: "Device") -> Optional[date]:
    """Next-due date of the latest calibration, if any."""
    latest = latest_calibration(device)
    return latest.next_calibration_date if latest else None


def preview_next_due(calibration_date: date, period_years: int, lang: Optional[str] = None) -> str:
    """Calibration form preview: formatted next-due date or 'not required' text."""
    next_due = compute_next_due(calibration_date, period_years)
    if next_due is None:
        return translate("calibrate.notRequired", lang)
    return format_date(next_due, lang)


def build_calibration(calibration_date: date, period_years: int,
                      certificate_data: Optional[str] = None,
                      certificate_filename: Optional[str] = None) -> "Calibration":
    """New history record from form input; the next-due date is derived by the model."""
    from models.calibration import Calibration
    if period_years < 0:
        raise ValueError(f"Calibration period must be >= 0, got {period_years}")
    return Calibration(
        calibration_date=calibration_date,
        calibration_period_years=period_years,
        certificate_data=certificate_data or None,
        certificate_filename=certificate_filename or None,
    )
