"""Configuration objects and helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .render import OutputFormat


@dataclass(frozen=True)
class EncodeConfig:
    """QR encoding options."""

    error_correction: str
    border: int


@dataclass(frozen=True)
class RenderConfig:
    """Rendering defaults."""

    output_format: OutputFormat
    scale: int
    svg_min_size: int


@dataclass(frozen=True)
class LoggingConfig:
    level: int


@dataclass(frozen=True)
class AppConfig:
    """Aggregate application configuration dataclass."""

    encode: EncodeConfig
    render: RenderConfig
    logging: LoggingConfig
    strict: bool


class Settings(BaseSettings):
    """Defaults parsed from ``QRFI_*`` environment variables."""

    format: OutputFormat = Field(OutputFormat.ASCII)
    error_correction: str = Field("M")
    border: int = Field(4, ge=0)
    scale: int = Field(10, ge=1)
    svg_min_size: int = Field(200, ge=0)
    strict: bool = Field(False)
    log_level: str | int = Field("WARNING")

    model_config = SettingsConfigDict(env_prefix="QRFI_", extra="ignore")

    @field_validator("error_correction")
    @classmethod
    def _normalize_error_correction(cls, value: str) -> str:
        name = value.upper().strip()
        if name not in {"L", "M", "Q", "H"}:
            raise ValueError(f"Unknown error correction level: {value}")
        return name

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str | int) -> int:
        if isinstance(value, int):
            return value
        name = value.upper().strip()
        if name.isdigit():
            return int(name)
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def to_dataclass(self) -> AppConfig:
        return AppConfig(
            encode=EncodeConfig(error_correction=self.error_correction, border=self.border),
            render=RenderConfig(
                output_format=self.format,
                scale=self.scale,
                svg_min_size=self.svg_min_size,
            ),
            logging=LoggingConfig(level=self.log_level),
            strict=self.strict,
        )


def load_settings() -> AppConfig:
    """Load settings from the environment and return dataclasses."""

    return Settings().to_dataclass()


__all__ = [
    "AppConfig",
    "EncodeConfig",
    "LoggingConfig",
    "RenderConfig",
    "Settings",
    "load_settings",
]
