"""
Calibration Tracker - Device Filter/Sort Engine
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): filter_options for manufacturer/usage dropdowns
v1.0.0 (2026-10-05): Search, categorical filters and single-key sort

view() is a pure function of its inputs: it never mutates the device
sequence it is handed and returns a new list on every call.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Union

from models.device import Device
from models.status import SortConfig, SortDirection, SortKey
from services.calibration_calculator import latest_next_due
from services.status_classifier import classify, status_rank
from services.text_utils import collation_key

ALL = "all"

SEARCH_FIELDS = ("name", "serial_number", "manufacturer", "model", "usage", "asset_code")


def matches_search(device: Device, term: str) -> bool:
    """Case-insensitive substring match against any searchable field"""
    if not term:
        return True
    needle = term.lower()
    return any(needle in (getattr(device, field) or "").lower() for field in SEARCH_FIELDS)


def _matches_category(value: str, selected: Optional[str]) -> bool:
    return not selected or selected == ALL or value == selected


def filter_devices(devices: Iterable[Device], search_term: str = "",
                   manufacturer: Optional[str] = ALL,
                   usage: Optional[str] = ALL) -> List[Device]:
    """Conjunction of manufacturer, usage and free-text filters"""
    return [
        d for d in devices
        if _matches_category(d.manufacturer, manufacturer)
        and _matches_category(d.usage, usage)
        and matches_search(d, search_term)
    ]


def sort_devices(devices: Iterable[Device],
                 sort_key: Union[SortKey, str] = SortKey.NAME,
                 sort_direction: Union[SortDirection, str] = SortDirection.ASC,
                 today: Optional[date] = None) -> List[Device]:
    """
    Stable sort by one key.

    name: accent/case-insensitive collation
    nextCalibrationDate: latest next-due date, missing dates sort last (as +inf)
    status: fixed rank table, not alphabetical
    """
    devices = list(devices)
    sort_key = SortKey(sort_key)
    reverse = SortDirection(sort_direction) == SortDirection.DESC
    today = today or date.today()

    if sort_key == SortKey.NAME:
        def key(d: Device):
            return collation_key(d.name)
    elif sort_key == SortKey.NEXT_CALIBRATION_DATE:
        def key(d: Device):
            next_due = latest_next_due(d)
            return (next_due is None, next_due or date.min)
    else:
        ranks: Dict[int, int] = {id(d): status_rank(classify(d, today)) for d in devices}

        def key(d: Device):
            return ranks[id(d)]

    return sorted(devices, key=key, reverse=reverse)


def view(devices: Iterable[Device], search_term: str = "",
         manufacturer: Optional[str] = ALL, usage: Optional[str] = ALL,
         sort_key: Union[SortKey, str] = SortKey.NAME,
         sort_direction: Union[SortDirection, str] = SortDirection.ASC,
         today: Optional[date] = None) -> List[Device]:
    """Filtered and sorted device list for the dashboard table and exports"""
    filtered = filter_devices(devices, search_term, manufacturer, usage)
    return sort_devices(filtered, sort_key, sort_direction, today)


def toggle_sort(current: SortConfig, key: Union[SortKey, str]) -> SortConfig:
    """Same key flips direction; a new key starts ascending"""
    key = SortKey(key)
    if current.key == key:
        flipped = SortDirection.DESC if current.direction == SortDirection.ASC else SortDirection.ASC
        return SortConfig(key=key, direction=flipped)
    return SortConfig(key=key, direction=SortDirection.ASC)


def filter_options(devices: Iterable[Device]) -> Dict[str, List[str]]:
    """Distinct non-empty manufacturers and usages, sorted"""
    devices = list(devices)
    return {
        "manufacturers": sorted({d.manufacturer for d in devices if d.manufacturer}),
        "usages": sorted({d.usage for d in devices if d.usage}),
    }
