"""
Calibration Tracker - Devices API
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Certificate download, next-due preview
v1.0.0 (2026-10-05): Device list/detail with derived status, add/calibrate/delete
"""

import binascii
import logging
from datetime import date
from urllib.parse import quote
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.deps import current_user, require_permission
from config import settings
from models.calibration import CalibrationCreate
from models.device import Device, DeviceCreate
from models.status import SortDirection, SortKey
from models.user import User
from services import device_view
from services.calibration_calculator import latest_calibration, preview_next_due, sorted_history
from services.device_service import decode_attachment, device_service
from services.errors import DeleteFailed, DeviceNotFound, SaveFailed, ValidationFailed
from services.report_projector import certificate_filename, history_certificate_filename, status_label
from services.status_classifier import classify
from services.text_utils import strip_accents
from services.translations import translate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devices", tags=["devices"])
calibrations_router = APIRouter(prefix="/calibrations", tags=["devices"])


# -- Helpers --

def _enrich_device(device: Device, lang: Optional[str], today: date) -> dict:
    """List row: device fields plus status and latest calibration, without attachments"""
    latest = latest_calibration(device)
    status = classify(device, today)
    return {
        "id": device.id,
        "name": device.name,
        "serial_number": device.serial_number,
        "manufacturer": device.manufacturer,
        "model": device.model,
        "usage": device.usage,
        "asset_code": device.asset_code,
        "has_photo": bool(device.photo_data),
        "status": status.value,
        "status_label": status_label(status, lang),
        "calibration_date": latest.calibration_date.isoformat() if latest else None,
        "calibration_period_years": latest.calibration_period_years if latest else None,
        "next_calibration_date": (latest.next_calibration_date.isoformat()
                                  if latest and latest.next_calibration_date else None),
        "has_certificate": bool(latest and latest.has_certificate),
        "certificate_filename": certificate_filename(device),
    }


def _history_rows(device: Device) -> list:
    """Calibration history newest first; certificate content is fetched separately"""
    rows = []
    for index, calibration in enumerate(sorted_history(device)):
        rows.append({
            "index": index,
            "calibration_date": calibration.calibration_date.isoformat(),
            "calibration_period_years": calibration.calibration_period_years,
            "next_calibration_date": (calibration.next_calibration_date.isoformat()
                                      if calibration.next_calibration_date else None),
            "has_certificate": calibration.has_certificate,
            "certificate_filename": (history_certificate_filename(calibration, device)
                                     if calibration.has_certificate else ""),
        })
    return rows


def _get_or_404(device_id: str) -> Device:
    try:
        return device_service.get_device(device_id)
    except DeviceNotFound:
        raise HTTPException(status_code=404, detail=f"Device {device_id} not found")


def _pdf_response(content: bytes, filename: str) -> Response:
    """Attachment response; non-ASCII names go in filename* (RFC 5987)"""
    fallback = strip_accents(filename).encode("ascii", "replace").decode("ascii")
    disposition = f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
    return Response(content=content, media_type="application/pdf",
                    headers={"Content-Disposition": disposition})


# -- Endpoints --

@router.get("")
async def list_devices(
    search: str = Query("", description="Substring match on name, serial, manufacturer, model, usage, asset code"),
    manufacturer: str = Query(device_view.ALL),
    usage: str = Query(device_view.ALL),
    sort_key: SortKey = Query(SortKey.NAME),
    sort_direction: SortDirection = Query(SortDirection.ASC),
    lang: Optional[str] = None,
    user: User = Depends(current_user),
):
    """Filtered, sorted device table"""
    today = date.today()
    devices = device_view.view(device_service.get_devices(), search, manufacturer, usage,
                               sort_key, sort_direction, today)
    return [_enrich_device(d, lang, today) for d in devices]


@router.get("/filters")
async def get_filter_options(user: User = Depends(current_user)):
    """Distinct manufacturers and usages for the filter dropdowns"""
    return device_view.filter_options(device_service.get_devices())


@router.get("/{device_id}")
async def get_device(device_id: str, lang: Optional[str] = None,
                     user: User = Depends(current_user)):
    """Device detail including photo and calibration history"""
    device = _get_or_404(device_id)
    result = _enrich_device(device, lang, date.today())
    result["photo_data"] = device.photo_data
    result["calibration_history"] = _history_rows(device)
    return result


@router.get("/{device_id}/history")
async def get_history(device_id: str, user: User = Depends(current_user)):
    return _history_rows(_get_or_404(device_id))


@router.get("/{device_id}/calibrations/{index}/certificate")
async def download_certificate(device_id: str, index: int,
                               user: User = Depends(current_user)):
    """
    Certificate PDF of a history entry.
    index counts from the newest calibration (0 = latest).
    """
    device = _get_or_404(device_id)
    history = sorted_history(device)
    if index < 0 or index >= len(history):
        raise HTTPException(status_code=404, detail=f"No calibration #{index} for device {device_id}")

    calibration = history[index]
    if not calibration.has_certificate:
        raise HTTPException(status_code=404, detail="No certificate attached")
    try:
        content = decode_attachment(calibration.certificate_data)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Corrupt certificate on device {device_id}: {e}")
        raise HTTPException(status_code=500, detail="Stored certificate is corrupt")

    filename = certificate_filename(device) if index == 0 else history_certificate_filename(calibration, device)
    return _pdf_response(content, filename)


@router.post("", status_code=201)
async def create_device(data: DeviceCreate, lang: Optional[str] = None,
                        user: User = Depends(require_permission("can_add_device"))):
    try:
        device = await device_service.add_device(data)
    except ValidationFailed as e:
        raise HTTPException(status_code=422, detail={"field_errors": e.field_errors})
    except SaveFailed as e:
        raise HTTPException(status_code=500, detail=translate(e.message_key, lang))
    return _enrich_device(device, lang, date.today())


@router.post("/{device_id}/calibrations", status_code=201)
async def calibrate_device(device_id: str, data: CalibrationCreate, lang: Optional[str] = None,
                           user: User = Depends(require_permission("can_calibrate"))):
    """Append a calibration record; next-due date is derived server-side"""
    try:
        device = await device_service.calibrate_device(device_id, data)
    except DeviceNotFound:
        raise HTTPException(status_code=404, detail=f"Device {device_id} not found")
    except ValidationFailed as e:
        raise HTTPException(status_code=422, detail={"field_errors": e.field_errors})
    except SaveFailed as e:
        raise HTTPException(status_code=500, detail=translate(e.message_key, lang))
    return _enrich_device(device, lang, date.today())


@router.delete("/{device_id}")
async def delete_device(device_id: str, lang: Optional[str] = None,
                        user: User = Depends(require_permission("can_delete"))):
    try:
        await device_service.delete_device(device_id)
    except DeviceNotFound:
        raise HTTPException(status_code=404, detail=f"Device {device_id} not found")
    except DeleteFailed as e:
        raise HTTPException(status_code=500, detail=translate(e.message_key, lang))
    return {"success": True}


@calibrations_router.get("/preview")
async def preview_next_calibration(calibration_date: date,
                                   calibration_period_years: Optional[int] = Query(None, ge=0),
                                   lang: Optional[str] = None,
                                   user: User = Depends(current_user)):
    """Next-due text shown in the calibration form before saving (period defaults to the form default)"""
    if calibration_period_years is None:
        calibration_period_years = settings.DEFAULT_CALIBRATION_PERIOD_YEARS
    return {"next_calibration_date": preview_next_due(calibration_date, calibration_period_years, lang)}
