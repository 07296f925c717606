# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration settings using Pydantic Settings.

Settings are loaded from environment variables (and an optional ``.env``
file) with defaults matching the published session contract.

The Settings class is the main entry point and aggregates all subsettings.
A cached instance is provided via get_settings().

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.store.max_sessions_per_learner
    200
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONTRACTS_VERSION = "0.1"


class StoreSettings(BaseSettings):
    """Hard caps for the bounded learning store.

    Caps may be tuned but are always enforced; exceeding one evicts the
    oldest entries first.

    Attributes:
        max_sessions_per_learner: Session records kept per learner.
        max_turns_per_session: Tutor turns kept per session record.
        max_observations_per_session: Observations kept per session record.
        max_kernel_runs_per_learner: Kernel run records kept per learner state.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEARNING_STORE_",
        extra="ignore",
    )

    max_sessions_per_learner: int = Field(default=200, ge=1)
    max_turns_per_session: int = Field(default=50, ge=1)
    max_observations_per_session: int = Field(default=200, ge=1)
    max_kernel_runs_per_learner: int = Field(default=50, ge=1)


class TutoringSettings(BaseSettings):
    """Turn-level behaviour switches.

    Attributes:
        contracts_version: Version stamped on every session trace.
        apply_age_band_style: Whether the orchestrator styles tutor turns
            for the learner's age band.
        style_profiles_path: Optional YAML file overriding style profiles.
    """

    model_config = SettingsConfigDict(
        env_prefix="TUTOR_",
        extra="ignore",
    )

    contracts_version: str = CONTRACTS_VERSION
    apply_age_band_style: bool = True
    style_profiles_path: Path | None = None


class Settings(BaseSettings):
    """Main settings aggregating all subsettings.

    Use get_settings() to obtain a cached instance.

    Attributes:
        environment: Current environment (development, test, production).
        debug: Enable debug mode.
        log_level: Logging level.
        tutoring: Turn-level settings.
        store: Bounded store caps.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "test", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    tutoring: TutoringSettings = Field(default_factory=TutoringSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)

    @model_validator(mode="after")
    def validate_contract_version(self) -> Self:
        """Reject a blank contract version.

        Raises:
            ValueError: If the contract version is empty.
        """
        if not self.tutoring.contracts_version.strip():
            raise ValueError(
                "Contract version must not be empty. "
                "Unset TUTOR_CONTRACTS_VERSION to use the default."
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or after changing environment variables.
    """
    get_settings.cache_clear()
