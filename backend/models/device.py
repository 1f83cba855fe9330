"""
Calibration Tracker - Device Models
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Device record and intake form models
"""

import re
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from .calibration import Calibration

# <Letter>-NN-NN-NNNN, e.g. A-12-34-5678
ASSET_CODE_PATTERN = re.compile(r"^[A-Za-z]-\d{2}-\d{2}-\d{4}$")

DEVICE_TEXT_FIELDS = ("name", "serial_number", "manufacturer", "model", "usage", "asset_code")


class Device(BaseModel):
    """Measuring device snapshot as held by the document store"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque document ID")
    name: str
    serial_number: str
    manufacturer: str
    model: str
    usage: str
    asset_code: str = Field(..., description="Asset code, <Letter>-NN-NN-NNNN")
    photo_data: Optional[str] = Field(None, description="Base64 photo")
    calibration_history: List[Calibration] = Field(default_factory=list)


class DeviceCreate(BaseModel):
    """Device intake form (validated by the device service)"""
    name: str = ""
    serial_number: str = ""
    manufacturer: str = ""
    model: str = ""
    usage: str = ""
    asset_code: str = ""
    photo_data: Optional[str] = None
