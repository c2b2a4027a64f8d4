from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from entitlement_engine.constants.headers import ORGANIZATION_OVERRIDE_HEADER
from entitlement_engine.constants.roles import MANAGER_OVERRIDE_LEVEL

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Entitlement Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Logging settings
    log_level: str = "INFO"
    json_logs: bool = True

    # Usage governor settings
    enable_usage_limits: bool = True
    usage_cache_ttl_seconds: float = 60.0
    usage_cache_sweep_interval_seconds: int = 300
    usage_warning_threshold: float = 0.8

    # Tenant resolution settings
    organization_override_header: str = ORGANIZATION_OVERRIDE_HEADER

    # Role level at or above which a member may act on resources
    # they are not assigned to
    default_override_level: int = MANAGER_OVERRIDE_LEVEL

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
