"""
Calibration Tracker - Calibration Models
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Certificate attachment fields
v1.0.0 (2026-10-05): Initial calibration models
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Optional
from datetime import date, datetime

from services.calibration_calculator import compute_next_due


def _calendar_date(value):
    """Accept dates, datetimes and ISO strings (date part only)"""
    if isinstance(value, datetime):
        return value.date()
    if value == "":
        return None
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


class Calibration(BaseModel):
    """
    One calibration event in a device's history.

    next_calibration_date is always derived from calibration_date and the
    period; a stored value is ignored on load and recomputed.
    """
    model_config = ConfigDict(frozen=True)

    calibration_date: date = Field(..., description="Date of calibration")
    calibration_period_years: int = Field(..., ge=0, description="Years until next calibration (0 = not required)")
    certificate_data: Optional[str] = Field(None, description="Base64 PDF certificate")
    certificate_filename: Optional[str] = Field(None, description="Uploaded certificate filename")

    @field_validator("calibration_date", mode="before")
    @classmethod
    def normalize_calibration_date(cls, v):
        return _calendar_date(v)

    @computed_field
    @property
    def next_calibration_date(self) -> Optional[date]:
        """Next calibration due date, absent when calibration is not required"""
        return compute_next_due(self.calibration_date, self.calibration_period_years)

    @property
    def has_certificate(self) -> bool:
        return bool(self.certificate_data)


class CalibrationCreate(BaseModel):
    """Record a new calibration (form input, validated by the device service)"""
    calibration_date: Optional[date] = None
    calibration_period_years: Optional[int] = None
    certificate_data: Optional[str] = None
    certificate_filename: Optional[str] = None

    @field_validator("calibration_date", mode="before")
    @classmethod
    def normalize_calibration_date(cls, v):
        return _calendar_date(v)
