"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]

_DEFAULT_FORCE_STYLE = (
    "FontName=Arial,FontSize=24,PrimaryColour=&HFFFFFF&,"
    "OutlineColour=&H000000&,Outline=2,BorderStyle=3"
)


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class FFmpegConfig(BaseSettings):
    """FFmpeg encoder configuration (audio extraction and burn-in)."""

    model_config = SettingsConfigDict(
        env_prefix="FFMPEG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bin: str = "ffmpeg"
    preset: str = "fast"
    crf: int = Field(default=23, ge=0, le=51)
    # Source containers re-encoded to mp4 before the burn step.
    convert_extensions: list[str] = Field(default_factory=lambda: [".webm"])
    force_style: str = _DEFAULT_FORCE_STYLE
    timeout_s: float | None = None

    @field_validator("convert_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        out: list[str] = []
        for ext in value:
            ext = str(ext or "").strip().lower()
            if not ext:
                continue
            out.append(ext if ext.startswith(".") else f".{ext}")
        return out


class WhisperConfig(BaseSettings):
    """Speech recognition (whisper CLI) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WHISPER_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bin: str = "whisper"
    model: str = "base"
    language: str = "en"
    # Span of the single cue synthesized when whisper leaves no subtitle file.
    fallback_cue_duration_s: float = Field(default=30.0, gt=0)
    timeout_s: float | None = None


class PipelineConfig(BaseSettings):
    """Pipeline wiring."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    media_provider: str = "ffmpeg_whisper"
    delete_input_on_success: bool = True


class StreamConfig(BaseSettings):
    """Range streaming configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STREAM_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    chunk_size: int = Field(default=64 * 1024, ge=1024)


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
    process_level: str = "INFO"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    storage_root: str = "./data"
    log_dir: str = "./logs"
    base_url: str = "http://localhost:8000"

    upload_max_bytes: int = Field(default=100 * 1024 * 1024, ge=1)
    allowed_video_types: list[str] = Field(
        default_factory=lambda: [
            "video/mp4",
            "video/quicktime",
            "video/x-msvideo",
            "video/x-matroska",
            "video/webm",
        ]
    )
    allowed_image_types: list[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/webp"]
    )

    ffmpeg: FFmpegConfig = FFmpegConfig()
    whisper: WhisperConfig = WhisperConfig()
    pipeline: PipelineConfig = PipelineConfig()
    stream: StreamConfig = StreamConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        # Apps may run with a different CWD; keep paths stable.
        self.storage_root = _resolve_repo_path(self.storage_root)
        self.log_dir = _resolve_repo_path(self.log_dir)
        return self
