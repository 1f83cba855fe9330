"""
Calibration Tracker - Device Service
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Certificate attachments must be PDFs; asset code upper-cased
v1.0.0 (2026-10-05): Live device snapshot over the document store; add/calibrate/delete

Writes go to the document store only. The in-memory snapshot is replaced
(never edited) by the store subscription after each write.
"""

import base64
import binascii
import logging
import uuid
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from models.calibration import CalibrationCreate
from models.device import ASSET_CODE_PATTERN, DEVICE_TEXT_FIELDS, Device, DeviceCreate
from services.calibration_calculator import build_calibration
from services.document_store import DocumentStore, document_store
from services.errors import DeleteFailed, DeviceNotFound, SaveFailed, StoreError, ValidationFailed

logger = logging.getLogger(__name__)

COLLECTION_NAME = "devices"

_DATA_URL_SEPARATOR = ";base64,"


def _strip_data_url(data: str) -> str:
    """'data:application/pdf;base64,JVBE...' -> 'JVBE...'"""
    if data.startswith("data:") and _DATA_URL_SEPARATOR in data:
        return data.split(_DATA_URL_SEPARATOR, 1)[1]
    return data


def decode_attachment(data: str) -> bytes:
    """Base64 (or data URL) attachment content to bytes"""
    return base64.b64decode(_strip_data_url(data), validate=True)


def validate_device_input(data: DeviceCreate) -> Dict[str, str]:
    """Field-level problems with a device intake form (empty dict when valid)"""
    errors = {}
    for field_name in DEVICE_TEXT_FIELDS:
        if not (getattr(data, field_name) or "").strip():
            errors[field_name] = "required"
    code = (data.asset_code or "").strip()
    if code and not ASSET_CODE_PATTERN.match(code):
        errors["asset_code"] = "must match <Letter>-NN-NN-NNNN"
    if data.photo_data:
        try:
            decode_attachment(data.photo_data)
        except (binascii.Error, ValueError):
            errors["photo_data"] = "not valid base64"
    return errors


def validate_calibration_input(data: CalibrationCreate) -> Dict[str, str]:
    """Field-level problems with a calibration form (empty dict when valid)"""
    errors = {}
    if data.calibration_date is None:
        errors["calibration_date"] = "required"
    if data.calibration_period_years is None:
        errors["calibration_period_years"] = "required"
    elif data.calibration_period_years < 0:
        errors["calibration_period_years"] = "must be 0 or more"

    if data.certificate_data:
        try:
            content = decode_attachment(data.certificate_data)
        except (binascii.Error, ValueError):
            errors["certificate_data"] = "not valid base64"
        else:
            filename = (data.certificate_filename or "").lower()
            if not (filename.endswith(".pdf") or content.startswith(b"%PDF")):
                errors["certificate_data"] = "certificate must be a PDF"
    return errors


class DeviceService:
    """Device collection backed by the document store"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.devices: List[Device] = []
        self.loaded = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def start(self):
        """Subscribe to the devices collection (first snapshot arrives before this returns)"""
        if self._unsubscribe is None:
            self._unsubscribe = await self.store.subscribe(COLLECTION_NAME, self._on_snapshot)
            logger.info(f"Device service started with {len(self.devices)} devices")

    def stop(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, records):
        devices = []
        for record in records:
            try:
                devices.append(Device.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed device record {record.get('id')}: {e}")
        self.devices = devices
        self.loaded = True

    def get_devices(self) -> List[Device]:
        return list(self.devices)

    def get_device(self, device_id: str) -> Device:
        for device in self.devices:
            if device.id == device_id:
                return device
        raise DeviceNotFound(device_id)

    async def add_device(self, data: DeviceCreate) -> Device:
        """Register a new device with an empty calibration history"""
        errors = validate_device_input(data)
        if errors:
            raise ValidationFailed(errors)

        device = Device(
            id=uuid.uuid4().hex,
            name=data.name.strip(),
            serial_number=data.serial_number.strip(),
            manufacturer=data.manufacturer.strip(),
            model=data.model.strip(),
            usage=data.usage.strip(),
            asset_code=data.asset_code.strip().upper(),
            photo_data=_strip_data_url(data.photo_data) if data.photo_data else None,
            calibration_history=[],
        )
        await self._save(device)
        logger.info(f"Added device {device.id} ({device.name}, {device.asset_code})")
        return device

    async def calibrate_device(self, device_id: str, data: CalibrationCreate) -> Device:
        """Append a calibration record; next-due date is derived, never taken from input"""
        device = self.get_device(device_id)
        errors = validate_calibration_input(data)
        if errors:
            raise ValidationFailed(errors)

        calibration = build_calibration(
            data.calibration_date,
            data.calibration_period_years,
            certificate_data=_strip_data_url(data.certificate_data) if data.certificate_data else None,
            certificate_filename=data.certificate_filename,
        )
        updated = device.model_copy(
            update={"calibration_history": [*device.calibration_history, calibration]}
        )
        await self._save(updated)
        logger.info(f"Calibrated device {device_id}: {calibration.calibration_date} "
                    f"+{calibration.calibration_period_years}y -> {calibration.next_calibration_date}")
        return updated

    async def delete_device(self, device_id: str) -> None:
        self.get_device(device_id)
        try:
            await self.store.delete(COLLECTION_NAME, device_id)
        except StoreError as e:
            logger.error(f"Error deleting device {device_id}: {e}")
            raise DeleteFailed(f"Failed to delete device {device_id}") from e
        logger.info(f"Deleted device {device_id}")

    async def _save(self, device: Device):
        try:
            await self.store.upsert(COLLECTION_NAME, device.id, device.model_dump(mode="json"))
        except StoreError as e:
            logger.error(f"Error saving device {device.id}: {e}")
            raise SaveFailed(f"Failed to save device {device.id}") from e


# Singleton instance
device_service = DeviceService(document_store)
