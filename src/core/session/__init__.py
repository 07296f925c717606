# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session Orchestrator.

Example usage:

    from src.core.session import LearningSessionRequest, run_learning_session

    output = run_learning_session(request)
    print(output.tutor_turn.message, output.session_trace.inputs_hash)
"""

from src.core.session.hashing import canonical_request_payload, compute_inputs_hash
from src.core.session.models import (
    LearningGoal,
    LearningSessionRequest,
    SessionOutput,
    SessionTrace,
    SkillGraphDelta,
)
from src.core.session.orchestrator import create_session_state, run_learning_session

__all__ = [
    "run_learning_session",
    "create_session_state",
    "compute_inputs_hash",
    "canonical_request_payload",
    "LearningGoal",
    "LearningSessionRequest",
    "SessionOutput",
    "SessionTrace",
    "SkillGraphDelta",
]
