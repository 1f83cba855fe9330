"""
Calibration Tracker - Export Row Model
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Flat export row shared by CSV and PDF renderers
"""

from pydantic import BaseModel
from typing import List

# Column order of a full export row, with the header translation key per column
REPORT_COLUMNS = [
    ("name", "device.name"),
    ("serial_number", "device.serialNumber"),
    ("manufacturer", "device.manufacturer"),
    ("model", "device.model"),
    ("usage", "device.usage"),
    ("asset_code", "device.assetCode"),
    ("status_label", "device.status"),
    ("calibration_date", "history.calibrationDate"),
    ("next_calibration_date", "history.validUntil"),
]

# The PDF table is narrower: no asset code, no calibration date
PDF_COLUMNS = [
    ("name", "device.name"),
    ("serial_number", "device.serialNumber"),
    ("manufacturer", "device.manufacturer"),
    ("model", "device.model"),
    ("usage", "device.usage"),
    ("status_label", "device.status"),
    ("next_calibration_date", "history.validUntil"),
]


class ReportRow(BaseModel):
    """One device flattened for export; every cell is already a display string"""
    name: str
    serial_number: str
    manufacturer: str
    model: str
    usage: str
    asset_code: str
    status_label: str
    calibration_date: str
    next_calibration_date: str

    def cells(self, columns=REPORT_COLUMNS) -> List[str]:
        return [getattr(self, field_name) for field_name, _ in columns]
