"""
Calibration Tracker - Status, Sorting and Dashboard Models
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Device status enum, sort configuration, dashboard stats
"""

from pydantic import BaseModel, Field
from enum import Enum
from typing import Dict, List


class DeviceStatus(str, Enum):
    """Calibration status derived from the latest calibration"""
    VALID = "valid"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"
    UNCALIBRATED = "uncalibrated"
    CALIBRATION_FREE = "calibration-free"


# Sort precedence for the status column (ascending)
STATUS_RANK: Dict[DeviceStatus, int] = {
    DeviceStatus.OVERDUE: 1,
    DeviceStatus.DUE_SOON: 2,
    DeviceStatus.UNCALIBRATED: 3,
    DeviceStatus.VALID: 4,
    DeviceStatus.CALIBRATION_FREE: 5,
}

# Translation keys: (long label, short chart label)
STATUS_LABEL_KEYS: Dict[DeviceStatus, tuple] = {
    DeviceStatus.VALID: ("status.valid", "status.validShort"),
    DeviceStatus.DUE_SOON: ("status.dueSoon", "status.dueSoonShort"),
    DeviceStatus.OVERDUE: ("status.overdue", "status.overdueShort"),
    DeviceStatus.UNCALIBRATED: ("status.uncalibrated", "status.uncalibratedShort"),
    DeviceStatus.CALIBRATION_FREE: ("status.calibrationFree", "status.calibrationFreeShort"),
}


class SortKey(str, Enum):
    NAME = "name"
    NEXT_CALIBRATION_DATE = "nextCalibrationDate"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortConfig(BaseModel):
    """Current sort column and direction, kept by the caller"""
    key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC


class ChartBucket(BaseModel):
    """One bar of the dashboard status chart"""
    status: DeviceStatus
    count: int = 0
    percentage: float = Field(0.0, ge=0.0, le=100.0)


class DashboardStats(BaseModel):
    """Dashboard counters and chart data"""
    total: int = 0
    counts_by_status: Dict[DeviceStatus, int] = Field(default_factory=dict)
    overdue_count: int = 0
    due_soon_this_month_count: int = 0
    chart_buckets: List[ChartBucket] = Field(default_factory=list)
