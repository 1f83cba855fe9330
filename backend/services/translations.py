"""
Calibration Tracker - Backend Translations
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): sk/en/de strings for status labels, exports and errors

Only the strings the backend itself emits live here (export headers,
status labels, error messages). The UI ships its own tables.
"""

import logging
from datetime import date
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("sk", "en", "de")

# dd.MM.yyyy everywhere, as the UI shows it
DATE_FORMATS = {
    "sk": "%d.%m.%Y",
    "en": "%d.%m.%Y",
    "de": "%d.%m.%Y",
}

TRANSLATIONS = {
    "sk": {
        "status.valid": "Platná",
        "status.dueSoon": "Končí platnosť",
        "status.overdue": "Neplatná",
        "status.uncalibrated": "Nekalibrované",
        "status.calibrationFree": "Kalibrácia nie je potrebná",
        "status.validShort": "Platná",
        "status.dueSoonShort": "Končí",
        "status.overdueShort": "Neplatná",
        "status.uncalibratedShort": "Nekalib.",
        "status.calibrationFreeShort": "Bez kalib.",
        "device.name": "Názov",
        "device.serialNumber": "Sériové číslo",
        "device.manufacturer": "Výrobca",
        "device.model": "Model",
        "device.usage": "Použitie",
        "device.assetCode": "MSN kód",
        "device.status": "Stav",
        "history.calibrationDate": "Dátum kalibrácie",
        "history.validUntil": "Platnosť do",
        "calibrate.notRequired": "Kalibrácia nie je potrebná",
        "export.csvFilename": "zariadenia_kalibracie",
        "export.pdfFilename": "zariadenia_kalibracie",
        "export.pdfTitle": "Evidencia kalibrácií",
        "export.chartTitle": "Stav zariadení",
        "general.notAvailable": "N/A",
        "general.errorSaving": "Chyba pri ukladaní. Skúste to znova.",
        "general.errorDeleting": "Chyba pri odstraňovaní. Skúste to znova.",
        "login.error": "Chyba pri prihlásení",
        "login.invalidCredentials": "Nesprávny email alebo heslo",
        "login.tooManyRequests": "Príliš mnoho pokusov. Skúste neskôr.",
        "login.networkError": "Chyba pripojenia k sieti",
        "register.error": "Chyba pri registrácii",
        "register.emailInUse": "Email už existuje",
        "register.weakPassword": "Heslo je príliš slabé",
        "register.invalidEmail": "Neplatný email",
    },
    "en": {
        "status.valid": "Valid",
        "status.dueSoon": "Due soon",
        "status.overdue": "Overdue",
        "status.uncalibrated": "Uncalibrated",
        "status.calibrationFree": "Calibration not required",
        "status.validShort": "Valid",
        "status.dueSoonShort": "Due",
        "status.overdueShort": "Overdue",
        "status.uncalibratedShort": "Uncalib.",
        "status.calibrationFreeShort": "Cal. free",
        "device.name": "Name",
        "device.serialNumber": "Serial number",
        "device.manufacturer": "Manufacturer",
        "device.model": "Model",
        "device.usage": "Usage",
        "device.assetCode": "MSN code",
        "device.status": "Status",
        "history.calibrationDate": "Calibration date",
        "history.validUntil": "Valid until",
        "calibrate.notRequired": "Calibration not required",
        "export.csvFilename": "devices_calibrations",
        "export.pdfFilename": "devices_calibrations",
        "export.pdfTitle": "Calibration records",
        "export.chartTitle": "Device status",
        "general.notAvailable": "N/A",
        "general.errorSaving": "Error while saving. Please try again.",
        "general.errorDeleting": "Error while deleting. Please try again.",
        "login.error": "Login failed",
        "login.invalidCredentials": "Incorrect email or password",
        "login.tooManyRequests": "Too many attempts. Try again later.",
        "login.networkError": "Network connection error",
        "register.error": "Registration failed",
        "register.emailInUse": "Email already exists",
        "register.weakPassword": "Password is too weak",
        "register.invalidEmail": "Invalid email",
    },
    "de": {
        "status.valid": "Gültig",
        "status.dueSoon": "Bald fällig",
        "status.overdue": "Überfällig",
        "status.uncalibrated": "Unkalibriert",
        "status.calibrationFree": "Keine Kalibrierung erforderlich",
        "status.validShort": "Gültig",
        "status.dueSoonShort": "Fällig",
        "status.overdueShort": "Überfällig",
        "status.uncalibratedShort": "Unkalib.",
        "status.calibrationFreeShort": "Kalib.-frei",
        "device.name": "Name",
        "device.serialNumber": "Seriennummer",
        "device.manufacturer": "Hersteller",
        "device.model": "Modell",
        "device.usage": "Verwendung",
        "device.assetCode": "MSN-Code",
        "device.status": "Status",
        "history.calibrationDate": "Kalibrierdatum",
        "history.validUntil": "Gültig bis",
        "calibrate.notRequired": "Keine Kalibrierung erforderlich",
        "export.csvFilename": "geraete_kalibrierungen",
        "export.pdfFilename": "geraete_kalibrierungen",
        "export.pdfTitle": "Kalibrierungsnachweis",
        "export.chartTitle": "Gerätestatus",
        "general.notAvailable": "N/A",
        "general.errorSaving": "Fehler beim Speichern. Bitte erneut versuchen.",
        "general.errorDeleting": "Fehler beim Löschen. Bitte erneut versuchen.",
        "login.error": "Anmeldung fehlgeschlagen",
        "login.invalidCredentials": "Falsche E-Mail oder falsches Passwort",
        "login.tooManyRequests": "Zu viele Versuche. Bitte später erneut versuchen.",
        "login.networkError": "Netzwerkverbindungsfehler",
        "register.error": "Registrierung fehlgeschlagen",
        "register.emailInUse": "E-Mail existiert bereits",
        "register.weakPassword": "Passwort ist zu schwach",
        "register.invalidEmail": "Ungültige E-Mail",
    },
}


def resolve_language(lang: Optional[str]) -> str:
    """Supported language code, falling back to the configured default"""
    if lang and lang.lower() in TRANSLATIONS:
        return lang.lower()
    return settings.DEFAULT_LANGUAGE


def translate(key: str, lang: Optional[str] = None) -> str:
    """Look up a string; unknown keys come back unchanged."""
    table = TRANSLATIONS[resolve_language(lang)]
    value = table.get(key)
    if value is None:
        logger.debug(f"Missing translation for '{key}' ({lang})")
        return key
    return value


def format_date(value: Optional[date], lang: Optional[str] = None) -> Optional[str]:
    """Format a calendar date for display/export; None stays None."""
    if value is None:
        return None
    fmt = DATE_FORMATS.get(resolve_language(lang), settings.DATE_FORMAT)
    return value.strftime(fmt)
