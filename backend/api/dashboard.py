"""
Calibration Tracker - Dashboard API
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Status counters and chart buckets
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from api.deps import current_user
from models.user import User
from services.dashboard_stats import build_stats
from services.device_service import device_service
from services.report_projector import status_label

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
async def get_stats(lang: Optional[str] = None, user: User = Depends(current_user)):
    """Counters over all devices (filters do not apply) with localized chart labels"""
    stats = build_stats(device_service.get_devices(), date.today())
    result = stats.model_dump(mode="json")
    for bucket, raw in zip(stats.chart_buckets, result["chart_buckets"]):
        raw["label"] = status_label(bucket.status, lang, short=True)
    return result
