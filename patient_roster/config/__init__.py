"""Configuration module."""

from .config_schema import (
    DEFAULT_CONFIG_PATH,
    BirthdateConfig,
    OverrideRule,
    PathConfig,
    ResolutionConfig,
    UuidConfig,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BirthdateConfig",
    "OverrideRule",
    "PathConfig",
    "ResolutionConfig",
    "UuidConfig",
    "load_config",
]
