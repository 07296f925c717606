# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

Provides learner profiles for each age band, a fixed clock, a fresh
store and a settings cache reset around every test.
"""

from collections.abc import Callable, Generator
from datetime import datetime, timezone

import pytest

from src.core.config.settings import StoreSettings, clear_settings_cache
from src.core.dialogue.constants import TutorMode
from src.core.dialogue.models import ContextFlags
from src.core.learner.constants import AgeBand
from src.core.learner.models import LearnerProfile, SafetyFlags
from src.core.session.models import LearningGoal, LearningSessionRequest
from src.core.store.memory_store import InMemoryLearningStore


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Clear cached settings before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def fixed_now() -> datetime:
    """Provide a fixed clock reading."""
    return datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# Learner Fixtures
# =============================================================================


@pytest.fixture
def make_profile() -> Callable[..., LearnerProfile]:
    """Provide a factory for learner profiles."""

    def _make(
        age_band: AgeBand = AgeBand.ADULT,
        minor: bool = False,
        learner_id: str = "learner-1",
    ) -> LearnerProfile:
        return LearnerProfile(
            learner_id=learner_id,
            age_band=age_band,
            safety=SafetyFlags(minor=minor),
        )

    return _make


@pytest.fixture
def adult_profile(make_profile: Callable[..., LearnerProfile]) -> LearnerProfile:
    """Provide an adult learner."""
    return make_profile(AgeBand.ADULT, minor=False, learner_id="adult-1")


@pytest.fixture
def young_profile(make_profile: Callable[..., LearnerProfile]) -> LearnerProfile:
    """Provide a 6-9 year old minor."""
    return make_profile(AgeBand.SIX_TO_NINE, minor=True, learner_id="young-1")


@pytest.fixture
def teen_profile(make_profile: Callable[..., LearnerProfile]) -> LearnerProfile:
    """Provide a teenage minor."""
    return make_profile(AgeBand.TEEN, minor=True, learner_id="teen-1")


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def fractions_goal() -> LearningGoal:
    """Provide a learning goal about fractions."""
    return LearningGoal(
        subject="mathematics",
        topic="fractions",
        objective="understand how to add fractions",
    )


@pytest.fixture
def make_request(
    adult_profile: LearnerProfile,
    fractions_goal: LearningGoal,
) -> Callable[..., LearningSessionRequest]:
    """Provide a factory for session requests (adult learner by default)."""

    def _make(
        utterance: str | None = None,
        learner: LearnerProfile | None = None,
        mode: TutorMode = TutorMode.SOCRATIC,
        session_id: str = "session-1",
        context_flags: ContextFlags | None = None,
        **kwargs: object,
    ) -> LearningSessionRequest:
        return LearningSessionRequest(
            session_id=session_id,
            learner=learner or adult_profile,
            goal=fractions_goal,
            mode=mode,
            utterance=utterance,
            context_flags=context_flags,
            **kwargs,
        )

    return _make


@pytest.fixture
def store() -> InMemoryLearningStore:
    """Provide an empty store with default caps."""
    return InMemoryLearningStore(settings=StoreSettings(), contracts_version="0.1")
