"""
Shared configuration management for the Clinic Access Layer.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLINIC_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Storage
    store_backend: str = Field(default="memory", description="memory or redis")
    redis_url: str = Field(default="redis://localhost:6379/0")
    status_storage_key: str = Field(default="appointment_statuses")
    store_cache_size: int = Field(default=256, ge=1, description="Per-clinic stores kept open")

    # Access rules
    landing_route: str = Field(default="/dashboard")
    bypass_roles: List[str] = Field(default_factory=lambda: ["super_admin", "admin"])
    protected_status_codes: List[str] = Field(
        default_factory=lambda: ["S001", "S002", "S004", "S005"]
    )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
