"""
Calibration Tracker - System Configuration
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Auth lockout and session expiry settings; PDF export styling
v1.0.0 (2026-10-05): Initial configuration module
"""

from pydantic_settings import BaseSettings
from pathlib import Path
import os


class Settings(BaseSettings):
    """System-wide configuration"""

    # Application
    APP_NAME: str = "Calibration Tracker"
    APP_VERSION: str = "1.1.0"
    DEBUG: bool = False

    # API Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_WORKERS: int = 1  # Store subscriptions are in-process

    # SQLite Configuration
    SQLITE_DB_PATH: str = str(Path(__file__).parent / "data" / "calibration_tracker.db")

    # File Paths
    DATA_DIR: str = str(Path(__file__).parent / "data")
    LOGS_DIR: str = str(Path(__file__).parent / "logs")

    # Localization
    DEFAULT_LANGUAGE: str = "sk"
    DATE_FORMAT: str = "%d.%m.%Y"  # dd.MM.yyyy in every supported language

    # Calibration Tracking
    DUE_SOON_WINDOW_DAYS: int = 30  # Days before expiry a device counts as due soon
    DEFAULT_CALIBRATION_PERIOD_YEARS: int = 1

    # Authentication
    SESSION_EXPIRE_MINUTES: int = 480
    AUTH_MAX_FAILED_ATTEMPTS: int = 5
    AUTH_LOCKOUT_MINUTES: int = 15
    AUTH_MIN_PASSWORD_LENGTH: int = 6
    DEMO_EMAIL_DOMAIN: str = "demo.com"  # Bare usernames log in as <name>@demo.com

    # Demo data
    SEED_DEMO_DATA: bool = True

    # Report Generation
    PDF_HEADER_COLOR: tuple = (22, 160, 133)
    PDF_FONT_SIZE: int = 8
    REPORT_DPI: int = 150

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CALTRACK_"


# Singleton instance
settings = Settings()


# Create required directories
def init_directories():
    """Create necessary directories if they don't exist"""
    db_dir = os.path.dirname(os.path.abspath(settings.SQLITE_DB_PATH))
    for directory in [settings.DATA_DIR, settings.LOGS_DIR, db_dir]:
        os.makedirs(directory, exist_ok=True)


if __name__ == "__main__":
    print(f"{settings.APP_NAME} Configuration v{settings.APP_VERSION}")
    print(f"SQLite: {settings.SQLITE_DB_PATH}")
    print(f"Default language: {settings.DEFAULT_LANGUAGE}")
    print(f"Due-soon window: {settings.DUE_SOON_WINDOW_DAYS} days")
    print(f"Session expiry: {settings.SESSION_EXPIRE_MINUTES} min")
