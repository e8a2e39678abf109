"""Configuration management for KafkaLens with RBAC."""

from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _split_csv(raw: str) -> List[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]


class Settings(BaseSettings):
    """Application settings with RBAC configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "KafkaLens"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    # API Configuration
    api_prefix: str = "/api/v1"
    allowed_origins: str = "*"

    # OAuth Proxy Configuration
    oauth_proxy_enabled: bool = True
    oauth_header_user: str = "X-Forwarded-User"

    # Authentication providers registered in front of the API
    # (oauth client registrations or LDAP), comma separated
    auth_providers: str = ""

    # Session store
    session_cookie_name: str = "SESSION"
    session_key_prefix: str = "session"
    session_expire_minutes: int = 1440  # 24 hours

    # RBAC Configuration
    rbac_config_file: Optional[str] = None
    rbac_roles: List[Dict[str, Any]] = Field(default_factory=list)

    # Kafka clusters served by this console, comma separated
    kafka_clusters: str = ""

    # Redis Configuration
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0
    redis_url: Optional[str] = Field(None, validate_default=True)

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_json: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False

    # Health Check
    health_check_path: str = "/health"
    readiness_check_path: str = "/ready"

    @field_validator("redis_url", mode="after")
    @classmethod
    def build_redis_url(cls, v, info):
        """Build Redis URL from components if not provided."""
        if v:
            return v

        host = info.data.get("redis_host", "redis")
        port = info.data.get("redis_port", 6379)
        password = info.data.get("redis_password")
        db = info.data.get("redis_db", 0)

        if password:
            return f"redis://:{password}@{host}:{port}/{db}"
        return f"redis://{host}:{port}/{db}"

    @property
    def origins(self) -> List[str]:
        """Allowed CORS origins."""
        return _split_csv(self.allowed_origins)

    @property
    def cluster_names(self) -> List[str]:
        """Configured Kafka cluster names, in declaration order."""
        return _split_csv(self.kafka_clusters)

    @property
    def registered_auth_providers(self) -> List[str]:
        """Names of the authentication mechanisms registered in front of the API."""
        return [p.lower() for p in _split_csv(self.auth_providers)]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience function for getting settings
settings = get_settings()
