# src/config/settings.py - v2
"""Typed configuration loaded via pydantic-settings.

Sources, highest priority first: keyword arguments, ANYREAD_* environment
variables (nested with "__", e.g. ANYREAD_AI__PROVIDER), then a .env file.
"""

from __future__ import annotations

from typing import Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from anyread.core.errors import ConfigurationError
from anyread.core.models import TableOutputFormat

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

LogSink = Callable[[str, str], None]


class AIConfig(BaseModel):
    """Vision provider connection settings."""

    provider: Literal["openai", "gemini", "anthropic", "custom"]
    api_key: str = ""
    base_url: str | None = None
    model: str | None = None
    vision_model: str | None = None
    timeout_s: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    headers: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_custom_provider(self) -> AIConfig:
        """The custom provider has no vendor defaults to fall back on."""
        if self.provider == "custom" and (not self.base_url or not self.model):
            raise ConfigurationError("custom AI provider requires both base_url and model")
        return self


class DownloadConfig(BaseModel):
    timeout_s: float = Field(default=60.0, gt=0)
    max_size_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    headers: dict[str, str] = Field(default_factory=dict)


class ExcelConfig(BaseModel):
    max_rows: int = -1  # <= 0 means unlimited
    all_sheets: bool = True
    output_format: TableOutputFormat = "markdown"


class CsvConfig(BaseModel):
    delimiter: str = ","
    max_rows: int = -1  # <= 0 means unlimited
    output_format: TableOutputFormat = "markdown"

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be a single character")
        if v == '"':
            raise ValueError("delimiter cannot be the quote character")
        return v


class ImageConfig(BaseModel):
    """AI settings for image, audio and video files."""

    enable_ai: bool = True
    prompt: str | None = None
    max_tokens: int = Field(default=2000, gt=0)


class PdfConfig(BaseModel):
    """AI fallback settings for PDFs that fail local extraction."""

    enable_ai: bool = True
    prompt: str | None = None
    max_tokens: int = Field(default=4000, gt=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    enabled: bool = True
    level: Literal["debug", "info", "warn", "error"] = "info"
    format: Literal["text", "json"] = "text"
    sink: Optional[LogSink] = Field(default=None, exclude=True)


class ParserSettings(BaseSettings):
    """Parser settings: AI provider, download, tabular, AI-path and logging blocks."""

    model_config = SettingsConfigDict(
        env_prefix="ANYREAD_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ai: AIConfig | None = None
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    excel: ExcelConfig = Field(default_factory=ExcelConfig)
    csv: CsvConfig = Field(default_factory=CsvConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    pdf: PdfConfig = Field(default_factory=PdfConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(**overrides: object) -> ParserSettings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (sub-config models or plain dicts).

    Returns:
        Validated ParserSettings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return ParserSettings(**overrides)  # type: ignore[arg-type]
