# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Turn guardrails.

Guardrails run before any scaffolding decision. A guardrail that fires
refuses the whole turn; the planner then records the refusal without
advancing the ladder or emitting observations.
"""

import logging

from src.core.config.settings import CONTRACTS_VERSION
from src.core.dialogue.constants import RefusalReason, TutorMode
from src.core.dialogue.models import DialogueState
from src.core.learner.constants import AgeBand

logger = logging.getLogger(__name__)

# Age bands that may not be examined without a teacher
EXAMINER_RESTRICTED_AGE_BANDS = frozenset({AgeBand.SIX_TO_NINE})


def check_contract_version(version: str, expected: str = CONTRACTS_VERSION) -> RefusalReason | None:
    """Check that a persisted state speaks the current contract version."""
    if version != expected:
        return RefusalReason.CONTRACT_VERSION_MISMATCH
    return None


def evaluate_guardrails(
    state: DialogueState,
    expected_version: str = CONTRACTS_VERSION,
) -> RefusalReason | None:
    """Evaluate every guardrail for the coming turn.

    Args:
        state: Dialogue state with this turn's mode and context flags.
        expected_version: Contract version the state must carry.

    Returns:
        The first refusal reason that applies, or None.
    """
    reason = check_contract_version(state.contracts_version, expected_version)
    if reason is not None:
        logger.warning(
            "Session %s carries contract version %s, expected %s",
            state.session_id,
            state.contracts_version,
            expected_version,
        )
        return reason

    flags = state.context_flags
    profile = state.learner_profile

    if (
        state.mode == TutorMode.EXAMINER
        and profile.age_band in EXAMINER_RESTRICTED_AGE_BANDS
        and not flags.teacher_present
    ):
        return RefusalReason.AGE_BAND_RESTRICTION

    if (
        flags.is_high_stakes_assessment is True
        and profile.safety.minor
        and not flags.teacher_present
    ):
        return RefusalReason.HIGH_STAKES_CHEATING_ATTEMPT

    return None
