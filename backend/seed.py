"""
Calibration Tracker - Database Seed Data
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Demo accounts for each role
v1.0.0 (2026-10-05): Initial seed data: 3 demo devices with calibration
                      dates relative to the seeding day
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Optional

from config import settings
from database import dump_document
from models.calibration import Calibration
from models.device import Device
from models.user import UserRole
from services.auth_service import hash_password
from services.calibration_calculator import add_years
from services.device_service import COLLECTION_NAME

log = logging.getLogger(__name__)

DEMO_PASSWORD = "password"


# =============================================================================
# USERS (one per role, log in with the bare username)
# =============================================================================

SEED_USERS = [
    {"username": "admin", "role": UserRole.ADMIN},
    {"username": "moderator", "role": UserRole.MODERATOR},
    {"username": "user", "role": UserRole.USER},
]


# =============================================================================
# DEVICES (3 records: one long overdue, one due soon, one just overdue)
# =============================================================================

def _months_ago(today: date, months: int, day: int) -> date:
    index = today.year * 12 + (today.month - 1) - months
    return date(index // 12, index % 12 + 1, day)


def build_demo_devices(today: Optional[date] = None) -> list:
    """Demo devices; statuses depend on the seeding day, not on fixed dates"""
    today = today or date.today()
    return [
        Device(
            id=uuid.uuid4().hex,
            name="Digitálny multimeter",
            serial_number="SN-001A",
            manufacturer="Fluke",
            model="87V",
            usage="Laboratórium A",
            asset_code="A-12-34-5678",
            calibration_history=[Calibration(
                calibration_date=_months_ago(today, 18, 15),
                calibration_period_years=1,
            )],
        ),
        Device(
            id=uuid.uuid4().hex,
            name="Osciloskop",
            serial_number="SN-002B",
            manufacturer="Tektronix",
            model="TBS1052B",
            usage="Výrobná linka 1",
            asset_code="B-23-45-6789",
            calibration_history=[Calibration(
                calibration_date=add_years(today + timedelta(days=20), -1),
                calibration_period_years=1,
            )],
        ),
        Device(
            id=uuid.uuid4().hex,
            name="Posuvné meradlo",
            serial_number="SN-003C",
            manufacturer="Mitutoyo",
            model='CD-6" ASX',
            usage="Kontrola kvality",
            asset_code="C-34-56-7890",
            calibration_history=[Calibration(
                calibration_date=add_years(today - timedelta(days=10), -2),
                calibration_period_years=2,
            )],
        ),
    ]


# =============================================================================
# seed_if_empty(db): populate tables when they are empty
# =============================================================================

async def seed_if_empty(db, today: Optional[date] = None):
    """Populate users and the devices collection if they are empty"""

    async def _count(sql: str, params: tuple = ()) -> int:
        row = await db.execute(sql, params)
        result = await row.fetchone()
        return result[0] if result else 0

    now = datetime.now().isoformat()

    # ------------------------------------------------------------------
    # 1. USERS
    # ------------------------------------------------------------------
    if await _count("SELECT COUNT(*) FROM users") == 0:
        log.info("Seeding users (%d records)...", len(SEED_USERS))
        password_hash = hash_password(DEMO_PASSWORD)
        for u in SEED_USERS:
            await db.execute(
                """INSERT INTO users (uid, email, username, role, password_hash, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (uuid.uuid4().hex, f"{u['username']}@{settings.DEMO_EMAIL_DOMAIN}",
                 u["username"], u["role"].value, password_hash, now),
            )

    # ------------------------------------------------------------------
    # 2. DEVICES
    # ------------------------------------------------------------------
    if await _count("SELECT COUNT(*) FROM documents WHERE collection = ?", (COLLECTION_NAME,)) == 0:
        devices = build_demo_devices(today)
        log.info("Seeding devices (%d records)...", len(devices))
        for d in devices:
            data = d.model_dump(mode="json", exclude_none=True)
            doc_id = data.pop("id")
            await db.execute(
                """INSERT INTO documents (collection, id, data, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (COLLECTION_NAME, doc_id, dump_document(data), now, now),
            )

    await db.commit()
    log.info("Seed data check complete")
