"""
Calibration Tracker - Service Errors
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Domain exceptions raised by services, mapped to HTTP by routers
"""

from typing import Dict


class StoreError(RuntimeError):
    """Document store read/write failed (disk, lock, corrupt row)"""


class ValidationFailed(ValueError):
    """Input rejected before reaching the store; carries per-field messages"""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Invalid fields: {fields}")


class DeviceNotFound(LookupError):
    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(f"Device {device_id} not found")


class SaveFailed(RuntimeError):
    """Generic save failure; the UI shows general.errorSaving"""
    message_key = "general.errorSaving"


class DeleteFailed(RuntimeError):
    """Generic delete failure; the UI shows general.errorDeleting"""
    message_key = "general.errorDeleting"
