"""
Calibration Tracker - Report Row Projector
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): PDF variant strips diacritics (Helvetica has no glyphs for them)
v1.0.0 (2026-10-05): Flat export rows and certificate filename defaults
"""

from datetime import date
from typing import Optional

from models.calibration import Calibration
from models.device import Device
from models.report import ReportRow
from models.status import DeviceStatus, STATUS_LABEL_KEYS
from services.calibration_calculator import latest_calibration
from services.status_classifier import classify
from services.text_utils import strip_accents, underscore_whitespace
from services.translations import format_date, translate

CERTIFICATE_PREFIX = "Certificate"


def status_label(status: DeviceStatus, lang: Optional[str] = None, short: bool = False) -> str:
    """Localized status text (long form for tables/exports, short for the chart)"""
    long_key, short_key = STATUS_LABEL_KEYS[status]
    return translate(short_key if short else long_key, lang)


def to_row(device: Device, lang: Optional[str] = None, today: Optional[date] = None) -> ReportRow:
    """Project a device and its derived status into display strings"""
    placeholder = translate("general.notAvailable", lang)
    latest = latest_calibration(device)
    status = classify(device, today)

    calibration_date = placeholder
    next_calibration_date = placeholder
    if latest is not None:
        calibration_date = format_date(latest.calibration_date, lang)
        if latest.next_calibration_date is not None:
            next_calibration_date = format_date(latest.next_calibration_date, lang)

    return ReportRow(
        name=device.name,
        serial_number=device.serial_number,
        manufacturer=device.manufacturer,
        model=device.model,
        usage=device.usage,
        asset_code=device.asset_code,
        status_label=status_label(status, lang),
        calibration_date=calibration_date,
        next_calibration_date=next_calibration_date,
    )


def to_pdf_row(device: Device, lang: Optional[str] = None, today: Optional[date] = None) -> ReportRow:
    """to_row with every text cell reduced to base letters for the PDF font"""
    row = to_row(device, lang, today)
    return ReportRow(**{name: strip_accents(value) for name, value in row.model_dump().items()})


def _filename_stem(device: Device) -> str:
    return f"{CERTIFICATE_PREFIX}_{underscore_whitespace(device.name)}_{device.serial_number}"


def certificate_filename(device: Device) -> str:
    """
    Download name for the latest calibration's certificate.

    Empty string when the latest calibration has no certificate attached.
    """
    latest = latest_calibration(device)
    if latest is None or not latest.has_certificate:
        return ""
    return latest.certificate_filename or f"{_filename_stem(device)}.pdf"


def history_certificate_filename(calibration: Calibration, device: Device) -> str:
    """Download name for a history row's certificate (adds the calibration year)"""
    if calibration.certificate_filename:
        return calibration.certificate_filename
    return f"{_filename_stem(device)}_{calibration.calibration_date.year}.pdf"
