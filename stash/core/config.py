"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Storage backend and id strategy are validated at
load time.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stash.domain.enums import IdStrategy


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_storage_and_ids rejects
    combinations the service cannot run with (unknown backend, S3
    without a bucket, unknown id strategy).
    """

    # App
    app_name: str = "stash"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server / public URLs
    host: str = "0.0.0.0"
    port: int = 40115
    domain: str = "localhost"
    use_ssl: bool = False
    # Behind a reverse proxy the public URL never carries the port.
    is_proxied: bool = False

    # Resource identifiers
    resource_id_size: int = 12
    gfy_id_size: int = 2
    resource_id_type: str = IdStrategy.RANDOM.value
    id_max_attempts: int = 10

    # Durable state: data.json (resources), auth.json (credentials), thumbnails/
    data_dir: str = "./data"
    bootstrap_username: str = "stash"
    # Accept any non-empty bearer token at upload and register it on first use.
    auto_register_tokens: bool = False
    watch_credentials: bool = True

    # Storage
    storage_backend: str = "local"
    storage_root: str = "./uploads"
    save_with_date: bool = False
    save_as_original: bool = False
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    # e.g. "AES256"; unset for MinIO and other stores without SSE.
    s3_server_side_encryption: str | None = None
    max_upload_size: int = 100 * 1024 * 1024  # 100MB

    # Post-processing
    thumbnail_size: int = 512
    post_process_timeout_seconds: float = 30.0

    # Webhook notifications
    webhook_base_url: str = "https://discord.com/api/webhooks"
    webhook_timeout_seconds: float = 10.0
    default_webhook_username: str = "stash"
    default_webhook_avatar: str | None = None

    # Request / middleware
    rate_limit_enabled: bool = True
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage_and_ids(self) -> "Settings":
        """Validate storage backend and default id strategy."""
        if self.storage_backend == "s3":
            if not self.s3_bucket:
                raise ValueError(
                    "s3_bucket is required when storage_backend is 's3'. "
                    "Set S3_BUCKET environment variable or update .env file."
                )
        elif self.storage_backend != "local":
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'local', 's3'"
            )
        if self.resource_id_type not in IdStrategy.values():
            raise ValueError(
                f"Invalid resource_id_type '{self.resource_id_type}'. "
                f"Must be one of: {', '.join(IdStrategy.values())}"
            )
        if self.id_max_attempts < 1:
            raise ValueError("id_max_attempts must be at least 1")
        return self

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @property
    def resources_file(self) -> Path:
        return self.data_path / "data.json"

    @property
    def credentials_file(self) -> Path:
        return self.data_path / "auth.json"

    @property
    def thumbnails_dir(self) -> Path:
        return self.data_path / "thumbnails"

    @property
    def default_id_strategy(self) -> IdStrategy:
        return IdStrategy(self.resource_id_type)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
