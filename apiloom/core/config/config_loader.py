"""YAML configuration for diagram generation.

Reads ``config/apiloom.yaml`` (directory overridable with
``APILOOM_CONFIG_DIR``), applies environment overrides and caches the
validated Settings until ``reload_configs()`` is called.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "APILOOM_CONFIG_DIR"
CONFIG_FILE_NAME = "apiloom.yaml"

COUPLING_ANALYZERS = ("static", "graph")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """The configuration file or an override holds an invalid value."""


class DiagramSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    package_diagram: bool = True
    output_dir: str = "apiviz-out"
    validate_output: bool = Field(default=False, alias="validate")
    coupling: str = "static"

    @field_validator("coupling")
    @classmethod
    def check_coupling(cls, value: str) -> str:
        if value not in COUPLING_ANALYZERS:
            raise ValueError(f"coupling must be one of {', '.join(COUPLING_ANALYZERS)}")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level


class Settings(BaseModel):
    """Validated run settings.

    ``categories`` entries are raw category options: a string in the
    ``name[:fill[:line]]`` form (or whitespace separated arguments), or a
    list of one to three arguments.
    """
    diagrams: DiagramSettings = Field(default_factory=DiagramSettings)
    categories: List[Union[str, List[str]]] = Field(default_factory=list)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("categories", mode="before")
    @classmethod
    def default_categories(cls, value: Any) -> Any:
        return value or []


_settings: Optional[Settings] = None


def get_config_path() -> Path:
    """Directory holding apiloom.yaml."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.cwd() / "config"


def load_config_file(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Raw YAML mapping, or {} when the file does not exist."""
    config_file = (config_dir or get_config_path()) / CONFIG_FILE_NAME
    if not config_file.exists():
        logger.debug(f"{config_file} not found, using defaults")
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"{config_file}: top level must be a mapping")

    logger.debug(f"Loaded configuration from {config_file}")
    return config


def _env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{raw}'")


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay APILOOM_* environment variables on a raw config mapping."""
    diagrams = dict(config.get("diagrams") or {})
    log_cfg = dict(config.get("logging") or {})

    output_dir = os.getenv("APILOOM_OUTPUT_DIR")
    if output_dir:
        diagrams["output_dir"] = output_dir

    package_diagram = _env_bool("APILOOM_PACKAGE_DIAGRAM")
    if package_diagram is not None:
        diagrams["package_diagram"] = package_diagram

    log_level = os.getenv("APILOOM_LOG_LEVEL")
    if log_level:
        log_cfg["level"] = log_level

    merged = dict(config)
    merged["diagrams"] = diagrams
    merged["logging"] = log_cfg
    return merged


def build_settings(config: Dict[str, Any]) -> Settings:
    try:
        return Settings.model_validate(config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_settings(config_dir: Optional[Path] = None) -> Settings:
    """Read, override and validate the configuration without caching."""
    return build_settings(apply_env_overrides(load_config_file(config_dir)))


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_configs() -> None:
    """Drop the cached Settings; the next get_settings() re-reads disk."""
    global _settings
    _settings = None
