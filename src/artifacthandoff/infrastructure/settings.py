"""Application settings using Pydantic Settings for configuration management."""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from artifacthandoff.domain.entities.delivery_job import (
    DELIVERY_ATTEMPTS,
    DELIVERY_BACKOFF_DELAY_MS,
    RetryPolicy,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Artifact Handoff"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Artifact store
    artifact_ttl_minutes: float = Field(30.0, gt=0)
    artifact_sweep_interval_seconds: float = Field(30.0, gt=0)

    # Catalog rendering service
    renderer_url: str = "http://localhost:8090"
    renderer_timeout_seconds: float = 60.0

    # Durable upload
    uploader_backend: Literal["local", "s3"] = "local"
    upload_dir: str = "./uploads"
    public_base_url: str | None = None

    s3_endpoint: str | None = None
    s3_region: str = "us-east-1"
    s3_access_key: SecretStr | None = None
    s3_secret_key: SecretStr | None = None
    s3_bucket: str = "catalogs"
    s3_prefix: str = "catalogs"
    s3_force_path_style: bool = True
    s3_presign_seconds: int = Field(3600, gt=0)
    # Public bucket or CDN base; presigned GETs are used when unset
    s3_public_base_url: str | None = None

    # Job queue
    queue_backend: Literal["memory", "kafka"] = "memory"
    kafka_brokers: str | None = None
    kafka_sasl_username: str | None = None
    kafka_sasl_password: SecretStr | None = None
    kafka_topic_delivery: str = "outbound.message-send.v1"
    kafka_flush_timeout_seconds: float = 10.0

    # Delivery retry policy (applied by the queue consumer)
    delivery_attempts: int = Field(DELIVERY_ATTEMPTS, ge=1)
    delivery_backoff_delay_ms: int = Field(DELIVERY_BACKOFF_DELAY_MS, ge=0)

    @property
    def artifact_ttl(self) -> timedelta:
        """Artifact time-to-live."""
        return timedelta(minutes=self.artifact_ttl_minutes)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            attempts=self.delivery_attempts,
            backoff_type="exponential",
            backoff_delay_ms=self.delivery_backoff_delay_ms,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
