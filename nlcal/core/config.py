"""
Configuration management for NLCal.

This module handles loading and validating configuration from YAML files
and environment variables using Pydantic for type safety.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"


class GeneralConfig(BaseModel):
    """General configuration."""
    name: str = "NLCal"
    debug: bool = False
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    data_dir: str = "data"

    @property
    def data_path(self) -> Path:
        """data_dir as a path; relative values are taken from the project root."""
        path = Path(self.data_dir).expanduser()
        return path if path.is_absolute() else PROJECT_ROOT / path


class ParserConfig(BaseModel):
    """Deterministic parser tuning."""
    default_duration_minutes: int = Field(default=60, ge=1, le=24 * 60)
    placeholder_title: str = Field(default="New Event", min_length=1)
    # Bare hours up to this value are read as PM ("at 3" -> 15:00)
    pm_heuristic_max_hour: int = Field(default=6, ge=0, le=11)
    # Start hour used when "tomorrow" is forced onto an event without a time
    default_tomorrow_hour: int = Field(default=10, ge=0, le=23)


class GenerativeConfig(BaseModel):
    """Generative fallback (Ollama) configuration."""
    enabled: bool = True
    model: str = "qwen2.5:0.5b"
    base_url: str = "http://localhost:11434"
    timeout_ms: int = Field(default=15000, ge=100)
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    num_predict: int = Field(default=300, ge=1)
    top_p: float = Field(default=0.9, ge=0.0, le=1.0)


class NlcalConfig(BaseModel):
    """Main NLCal configuration."""
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    generative: GenerativeConfig = Field(default_factory=GenerativeConfig)


class EnvSettings(BaseSettings):
    """Environment variables settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Ollama
    ollama_base_url: Optional[str] = Field(default=None, alias="OLLAMA_BASE_URL")
    ai_model: Optional[str] = Field(default=None, alias="AI_MODEL")
    generative_enabled: Optional[bool] = Field(default=None, alias="NLCAL_GENERATIVE_ENABLED")

    # Logging
    log_level: Optional[str] = Field(default=None, alias="NLCAL_LOG_LEVEL")


def load_yaml_config(config_path: Path | str | None = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        config_path = CONFIG_DIR / "settings.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return data


def apply_env_overrides(data: Dict[str, Any], settings: EnvSettings) -> Dict[str, Any]:
    """Overlay environment settings onto raw YAML configuration data."""
    merged: Dict[str, Any] = {}
    for section, values in data.items():
        if values is not None and not isinstance(values, dict):
            raise ConfigurationError(f"Config section '{section}' must be a mapping")
        merged[section] = dict(values or {})

    generative = merged.setdefault("generative", {})
    general = merged.setdefault("general", {})

    if settings.ollama_base_url:
        generative["base_url"] = settings.ollama_base_url
    if settings.ai_model:
        generative["model"] = settings.ai_model
    if settings.generative_enabled is not None:
        generative["enabled"] = settings.generative_enabled
    if settings.log_level:
        general["log_level"] = settings.log_level.upper()

    return merged


def get_config(
    config_path: Path | str | None = None,
    settings: Optional[EnvSettings] = None,
) -> NlcalConfig:
    """
    Load and return the NLCal configuration.

    Merges YAML configuration with environment variables.
    """
    yaml_config = load_yaml_config(config_path)
    merged = apply_env_overrides(yaml_config, settings or get_env_settings())
    try:
        return NlcalConfig(**merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def get_env_settings() -> EnvSettings:
    """Get environment settings."""
    return EnvSettings()


# Global configuration instance (lazy loaded)
_config: Optional[NlcalConfig] = None


def config() -> NlcalConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = get_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next access reloads it."""
    global _config
    _config = None
