from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"

    # Data source
    data_dir: str = "sample_data"
    data_backend: str = "csv"
    default_organization_id: Optional[str] = None

    # Reports
    default_report_range: str = "month"
    # IANA zone name used for day keys and "today"; None means system local time
    report_timezone: Optional[str] = None

    # Seed data settings
    default_seed_scale: str = "small"
    default_seed_days: int = 60
    default_seed_value: int = 42

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)

def get_report_timezone() -> Optional[tzinfo]:
    """Configured report time zone, or None for system local time."""
    name = get_config().report_timezone
    return ZoneInfo(name) if name else None
