# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the session core.

This package provides centralized configuration management:
- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Utilities for loading YAML override files

Example:
    >>> from src.core.config import get_settings
    >>> get_settings().tutoring.contracts_version
    '0.1'
"""

from src.core.config.settings import (
    CONTRACTS_VERSION,
    Settings,
    StoreSettings,
    TutoringSettings,
    clear_settings_cache,
    get_settings,
)
from src.core.config.yaml_loader import (
    YAMLLoadError,
    deep_merge,
    load_overrides,
    load_yaml,
)

__all__ = [
    # Settings
    "CONTRACTS_VERSION",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "StoreSettings",
    "TutoringSettings",
    # YAML
    "YAMLLoadError",
    "deep_merge",
    "load_yaml",
    "load_overrides",
]
