"""
Calibration Tracker - Exports API
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): PDF includes the status chart
v1.0.0 (2026-10-05): CSV and PDF downloads of the filtered device table
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.deps import current_user
from models.status import SortDirection, SortKey
from models.user import User
from services import device_view
from services.dashboard_stats import build_stats
from services.device_service import device_service
from services.export_renderers import (
    CSV_MEDIA_TYPE, PDF_MEDIA_TYPE, export_filename, render_csv, render_pdf,
)
from services.report_projector import to_pdf_row, to_row

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exports", tags=["exports"])


def _visible_devices(search, manufacturer, usage, sort_key, sort_direction, today):
    """Same rows, same order as the device table"""
    return device_view.view(device_service.get_devices(), search, manufacturer, usage,
                            sort_key, sort_direction, today)


def _download(content: bytes, media_type: str, filename: str) -> Response:
    return Response(content=content, media_type=media_type,
                    headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.get("/csv")
async def export_csv(
    search: str = "",
    manufacturer: str = Query(device_view.ALL),
    usage: str = Query(device_view.ALL),
    sort_key: SortKey = Query(SortKey.NAME),
    sort_direction: SortDirection = Query(SortDirection.ASC),
    lang: Optional[str] = None,
    user: User = Depends(current_user),
):
    today = date.today()
    devices = _visible_devices(search, manufacturer, usage, sort_key, sort_direction, today)
    content = render_csv([to_row(d, lang, today) for d in devices], lang)
    logger.info(f"CSV export by {user.username}: {len(devices)} devices")
    return _download(content, CSV_MEDIA_TYPE, export_filename("csv", lang))


@router.get("/pdf")
async def export_pdf(
    search: str = "",
    manufacturer: str = Query(device_view.ALL),
    usage: str = Query(device_view.ALL),
    sort_key: SortKey = Query(SortKey.NAME),
    sort_direction: SortDirection = Query(SortDirection.ASC),
    include_chart: bool = True,
    lang: Optional[str] = None,
    user: User = Depends(current_user),
):
    today = date.today()
    devices = _visible_devices(search, manufacturer, usage, sort_key, sort_direction, today)
    buckets = build_stats(devices, today).chart_buckets if include_chart else None
    try:
        content = render_pdf([to_pdf_row(d, lang, today) for d in devices], lang,
                             chart_buckets=buckets, generated_on=today)
    except Exception as e:
        logger.error(f"PDF export failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate PDF: {str(e)}")
    logger.info(f"PDF export by {user.username}: {len(devices)} devices")
    return _download(content, PDF_MEDIA_TYPE, export_filename("pdf", lang))
