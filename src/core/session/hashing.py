# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Canonical request hashing for session traces."""

import hashlib
import json
from typing import Any

from src.core.session.models import LearningSessionRequest


def canonical_request_payload(request: LearningSessionRequest) -> dict[str, Any]:
    """Select the request fields that determine a turn's outcome."""
    return {
        "session_id": request.session_id,
        "learner_id": request.learner.learner_id,
        "goal": request.goal.model_dump(mode="json"),
        "mode": request.mode.value,
        "utterance": request.utterance,
        "requested_assessment": (
            request.requested_assessment.value if request.requested_assessment else None
        ),
    }


def compute_inputs_hash(request: LearningSessionRequest) -> str:
    """Compute the SHA-256 hex digest of the canonical request payload.

    Keys are sorted and separators compact, so equal requests always hash
    the same regardless of field order.
    """
    serialized = json.dumps(
        canonical_request_payload(request),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()
