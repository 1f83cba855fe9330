"""Export row projection and certificate filename defaults."""

from datetime import date

from models.calibration import Calibration
from services.report_projector import (
    certificate_filename, history_certificate_filename, status_label, to_pdf_row, to_row,
)
from models.status import DeviceStatus

TODAY = date(2024, 6, 15)
PDF_B64 = "JVBERi0xLjQ="  # %PDF-1.4


def test_uncalibrated_row_uses_placeholder(make_device):
    row = to_row(make_device(name="Scale"), "en", TODAY)
    assert row.status_label == "Uncalibrated"
    assert row.calibration_date == "N/A"
    assert row.next_calibration_date == "N/A"


def test_calibrated_row_formats_dates(make_device):
    row = to_row(make_device(history=[(date(2024, 1, 10), 2)]), "en", TODAY)
    assert row.status_label == "Valid"
    assert row.calibration_date == "10.01.2024"
    assert row.next_calibration_date == "10.01.2026"


def test_calibration_free_row_has_no_next_date(make_device):
    row = to_row(make_device(history=[(date(2024, 1, 10), 0)]), "en", TODAY)
    assert row.calibration_date == "10.01.2024"
    assert row.next_calibration_date == "N/A"
    assert row.status_label == "Calibration not required"


def test_status_label_languages():
    assert status_label(DeviceStatus.OVERDUE, "sk") == "Neplatná"
    assert status_label(DeviceStatus.OVERDUE, "de") == "Überfällig"
    assert status_label(DeviceStatus.DUE_SOON, "en", short=True) == "Due"
    # Unknown language falls back to the default (sk)
    assert status_label(DeviceStatus.VALID, "xx") == "Platná"


def test_pdf_row_strips_accents(make_device):
    device = make_device(name="Posuvné meradlo", usage="Výrobná linka 1")
    row = to_pdf_row(device, "sk", TODAY)
    assert row.name == "Posuvne meradlo"
    assert row.usage == "Vyrobna linka 1"
    assert row.status_label == "Nekalibrovane"


def test_certificate_filename_default(make_device):
    cal = Calibration(calibration_date=date(2024, 1, 10), calibration_period_years=1,
                      certificate_data=PDF_B64)
    device = make_device(name="Digital  multimeter", serial_number="SN-1", history=[cal])
    assert certificate_filename(device) == "Certificate_Digital_multimeter_SN-1.pdf"
    assert history_certificate_filename(cal, device) == "Certificate_Digital_multimeter_SN-1_2024.pdf"


def test_certificate_filename_prefers_uploaded_name(make_device):
    cal = Calibration(calibration_date=date(2024, 1, 10), calibration_period_years=1,
                      certificate_data=PDF_B64, certificate_filename="lab-report.pdf")
    device = make_device(history=[cal])
    assert certificate_filename(device) == "lab-report.pdf"
    assert history_certificate_filename(cal, device) == "lab-report.pdf"


def test_no_certificate_on_latest(make_device):
    old = Calibration(calibration_date=date(2022, 1, 10), calibration_period_years=1,
                      certificate_data=PDF_B64)
    new = Calibration(calibration_date=date(2024, 1, 10), calibration_period_years=1)
    assert certificate_filename(make_device(history=[old, new])) == ""
    assert certificate_filename(make_device()) == ""
