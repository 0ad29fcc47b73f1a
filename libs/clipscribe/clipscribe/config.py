"""Configuration management using pydantic-settings."""

from pathlib import Path
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clipscribe.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class MediaConfig(BaseSettings):
    """External media tool (ffmpeg/ffprobe) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "ffmpeg"
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"

    thumbnail_offset_s: float = Field(default=1.0, ge=0)
    thumbnail_max_width: int = Field(default=320, ge=16)
    thumbnail_max_height: int = Field(default=240, ge=16)
    audio_bitrate: str = "64k"
    # Per-invocation guard for the tool itself; the orchestrator never times out a run.
    tool_timeout_s: float | None = None


class TranscriptionConfig(BaseSettings):
    """Transcription provider configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "openai"
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "whisper-1"
    language: str | None = None
    timeout: float = 300.0  # 单个请求超时（秒）


class RateLimitConfig(BaseSettings):
    """Per-client request limits for /api routes."""

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    window_s: int = Field(default=15 * 60, ge=1)
    max_requests: int = Field(default=100, ge=1)


class SweeperConfig(BaseSettings):
    """Periodic removal of stale files left in the uploads directory."""

    model_config = SettingsConfigDict(
        env_prefix="SWEEPER_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    interval_s: float = Field(default=3600.0, gt=0)
    max_age_s: float = Field(default=3600.0, gt=0)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    data_dir: str = "./data"
    log_dir: str = "./logs"
    upload_max_bytes: int = Field(default=100 * 1024 * 1024, ge=1)

    # HTTP boundary
    allowed_origins: str = "*"
    expose_error_details: bool = False

    # Database
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_db: str = "clipscribe"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_pool_min_size: int = Field(default=1, ge=0)
    postgres_pool_max_size: int = Field(default=10, ge=1)
    postgres_connect_timeout_s: float = Field(default=10.0, gt=0)

    # Redis (rate limit counters); empty disables Redis and keeps counters in-process
    redis_url: str = "redis://localhost:6379"

    media: MediaConfig = MediaConfig()
    transcription: TranscriptionConfig = TranscriptionConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    sweeper: SweeperConfig = SweeperConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _validate(self) -> "Settings":
        # Running apps with `uv run --directory apps/*` changes CWD; keep paths stable.
        self.data_dir = _resolve_repo_path(self.data_dir)
        self.log_dir = _resolve_repo_path(self.log_dir)
        for p in (self.data_dir, self.log_dir):
            Path(p).mkdir(parents=True, exist_ok=True)
        if self.postgres_pool_min_size > self.postgres_pool_max_size:
            raise ConfigurationError(
                "POSTGRES_POOL_MIN_SIZE must not exceed POSTGRES_POOL_MAX_SIZE"
            )
        if self.sweeper.enabled and self.sweeper.max_age_s < 60:
            raise ConfigurationError(
                "SWEEPER_MAX_AGE_S must be >= 60 so in-flight uploads are never swept"
            )
        return self

    @property
    def uploads_dir(self) -> str:
        return str(Path(self.data_dir) / "uploads")

    @property
    def cors_origins(self) -> list[str]:
        raw = str(self.allowed_origins or "").strip()
        if not raw or raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def database_url(self) -> str:
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
