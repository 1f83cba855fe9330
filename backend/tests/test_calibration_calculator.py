"""Next-due arithmetic, history ordering and the form preview."""

from datetime import date, datetime

import pytest

from models.calibration import Calibration
from services.calibration_calculator import (
    add_years, build_calibration, compute_next_due, latest_calibration, latest_next_due,
    preview_next_due, sorted_history,
)


def test_add_years_keeps_month_and_day():
    assert add_years(date(2024, 1, 10), 2) == date(2026, 1, 10)


def test_leap_day_rolls_to_march_first():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 3, 1)


def test_leap_day_into_leap_year_stays():
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_zero_period_has_no_next_due():
    assert compute_next_due(date(2024, 1, 10), 0) is None


def test_negative_period_rejected():
    with pytest.raises(ValueError):
        compute_next_due(date(2024, 1, 10), -1)


def test_next_due_is_derived_and_stored_value_ignored():
    cal = Calibration.model_validate({
        "calibration_date": "2024-01-10T00:00:00.000Z",
        "calibration_period_years": 2,
        "next_calibration_date": "1999-01-01",
    })
    assert cal.calibration_date == date(2024, 1, 10)
    assert cal.next_calibration_date == date(2026, 1, 10)


def test_calibration_accepts_datetime():
    cal = Calibration(calibration_date=datetime(2024, 3, 5, 14, 30), calibration_period_years=1)
    assert cal.calibration_date == date(2024, 3, 5)


def test_latest_calibration_is_by_date_not_position(make_device):
    device = make_device(history=[(date(2023, 5, 1), 1), (date(2024, 2, 1), 2), (date(2022, 1, 1), 1)])
    latest = latest_calibration(device)
    assert latest.calibration_date == date(2024, 2, 1)
    assert latest_next_due(device) == date(2026, 2, 1)


def test_equal_dates_keep_history_order(make_device):
    first = Calibration(calibration_date=date(2024, 2, 1), calibration_period_years=1)
    second = Calibration(calibration_date=date(2024, 2, 1), calibration_period_years=3)
    device = make_device(history=[first, second])
    assert sorted_history(device) == [first, second]
    assert latest_calibration(device) is first


def test_no_history(make_device):
    device = make_device()
    assert latest_calibration(device) is None
    assert latest_next_due(device) is None


def test_preview_formats_date():
    assert preview_next_due(date(2024, 1, 10), 2, "en") == "10.01.2026"


def test_preview_not_required_text():
    assert preview_next_due(date(2024, 1, 10), 0, "en") == "Calibration not required"
    assert preview_next_due(date(2024, 1, 10), 0, "de") == "Keine Kalibrierung erforderlich"


def test_build_calibration():
    cal = build_calibration(date(2024, 2, 29), 1, certificate_data="", certificate_filename="")
    assert cal.next_calibration_date == date(2025, 3, 1)
    assert cal.certificate_data is None
    assert not cal.has_certificate


def test_build_calibration_rejects_negative_period():
    with pytest.raises(ValueError):
        build_calibration(date(2024, 1, 1), -2)
