from .config_loader import (
    ConfigError,
    DiagramSettings,
    LoggingSettings,
    Settings,
    get_config_path,
    get_settings,
    load_settings,
    reload_configs,
)

__all__ = [
    "ConfigError",
    "DiagramSettings",
    "LoggingSettings",
    "Settings",
    "get_config_path",
    "get_settings",
    "load_settings",
    "reload_configs",
]
