# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-scoped views of stored records.

Policy:
- The learner always sees their own records
- Parents see a minor's records; adults are private by default
- Teachers see a minor's records, or an adult's when the adult opted in

Denial is a normal result: the view comes back empty with a visibility
note. Every permitted view is sanitized: refusal codes and notes carrying
internal, system or debug markers are dropped (public reason codes are
always kept), kernel trace nodes with such markers are removed, and
internal notes are never included.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.core.dialogue.constants import PUBLIC_REASON_CODES
from src.core.dialogue.models import DialogueTurn
from src.core.learner.models import (
    CognitiveSkillGraph,
    LearnerProfile,
    LearningSessionObservation,
)
from src.core.session.models import LearningGoal, SessionTrace
from src.core.store.models import KernelRunRecord, StoredLearnerState, StoredSessionRecord

ACCESS_DENIED_NOTE = "Access denied for this role"

INTERNAL_MARKER_PATTERN = re.compile(r"internal|system|debug", re.IGNORECASE)


class ViewerRole(str, Enum):
    """Who is looking at a record."""

    LEARNER = "Learner"
    PARENT = "Parent"
    TEACHER = "Teacher"


@dataclass(frozen=True)
class VisibilityPolicy:
    """Who besides the learner may view a learner's records."""

    is_minor: bool
    parent_can_view: bool
    teacher_can_view: bool


@dataclass(frozen=True)
class SessionView:
    """Role-scoped view of a stored session."""

    session_id: str
    learner_id: str
    goal: LearningGoal | None
    created_at_iso: str | None
    tutor_turns: tuple[DialogueTurn, ...] = ()
    observations: tuple[LearningSessionObservation, ...] = ()
    session_trace: SessionTrace | None = None
    visibility_note: str | None = None

    @property
    def is_denied(self) -> bool:
        """Check if the viewer was denied access."""
        return self.visibility_note == ACCESS_DENIED_NOTE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "session_id": self.session_id,
            "learner_id": self.learner_id,
            "goal": self.goal.model_dump(mode="json") if self.goal else None,
            "created_at_iso": self.created_at_iso,
            "tutor_turns": [turn.to_dict() for turn in self.tutor_turns],
            "observations": [obs.to_dict() for obs in self.observations],
            "session_trace": self.session_trace.to_dict() if self.session_trace else None,
            "visibility_note": self.visibility_note,
        }


@dataclass(frozen=True)
class LearnerStateView:
    """Role-scoped view of a learner's stored state."""

    learner_id: str
    learner_profile: LearnerProfile | None = None
    skill_graph: CognitiveSkillGraph | None = None
    version: str | None = None
    kernel_runs: tuple[KernelRunRecord, ...] | None = None
    visibility_note: str | None = None

    @property
    def is_denied(self) -> bool:
        """Check if the viewer was denied access."""
        return self.visibility_note == ACCESS_DENIED_NOTE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "learner_id": self.learner_id,
            "learner_profile": (
                self.learner_profile.model_dump(mode="json") if self.learner_profile else None
            ),
            "skill_graph": self.skill_graph.to_dict() if self.skill_graph else None,
            "version": self.version,
            "kernel_runs": (
                [run.to_dict() for run in self.kernel_runs]
                if self.kernel_runs is not None
                else None
            ),
            "visibility_note": self.visibility_note,
        }


def get_visibility_policy(profile: LearnerProfile, teacher_opt_in: bool = False) -> VisibilityPolicy:
    """Derive the visibility policy for a learner.

    Args:
        profile: Learner profile.
        teacher_opt_in: An adult learner opted in to teacher access.

    Returns:
        VisibilityPolicy for the learner.
    """
    is_minor = profile.safety.minor
    return VisibilityPolicy(
        is_minor=is_minor,
        parent_can_view=is_minor,
        teacher_can_view=is_minor or teacher_opt_in,
    )


def can_view(role: ViewerRole | str, policy: VisibilityPolicy) -> bool:
    """Check if a role may view a learner's records.

    Raises:
        ValueError: If role is not a known viewer role.
    """
    role = ViewerRole(role)
    if role == ViewerRole.LEARNER:
        return True
    if role == ViewerRole.PARENT:
        return policy.parent_can_view
    return policy.teacher_can_view


def is_internal(text: str) -> bool:
    """Check if a string carries an internal marker."""
    return bool(INTERNAL_MARKER_PATTERN.search(text))


def sanitize_codes(values: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Drop internal strings, always keeping public reason codes."""
    return tuple(v for v in values if v in PUBLIC_REASON_CODES or not is_internal(v))


def sanitize_trace(trace: SessionTrace | None) -> SessionTrace | None:
    """Strip internal refusal codes and notes from a session trace."""
    if trace is None:
        return None
    return SessionTrace(
        session_id=trace.session_id,
        learner_id=trace.learner_id,
        timestamp_iso=trace.timestamp_iso,
        inputs_hash=trace.inputs_hash,
        contracts_version=trace.contracts_version,
        turn_count=trace.turn_count,
        refusals=sanitize_codes(trace.refusals),
        notes=sanitize_codes(trace.notes),
        assessment_generated=trace.assessment_generated,
        skill_updates_count=trace.skill_updates_count,
    )


def sanitize_kernel_run(run: KernelRunRecord) -> KernelRunRecord:
    """Remove trace nodes whose label or description is internal."""
    return KernelRunRecord(
        run_id=run.run_id,
        kernel_id=run.kernel_id,
        adapter_id=run.adapter_id,
        learner_id=run.learner_id,
        created_at_iso=run.created_at_iso,
        input_hash=run.input_hash,
        decision=run.decision,
        claims=run.claims,
        trace=tuple(
            node
            for node in run.trace
            if not is_internal(node.label) and not is_internal(node.description)
        ),
    )


def filter_session_for_viewer(
    record: StoredSessionRecord,
    role: ViewerRole | str,
    policy: VisibilityPolicy,
) -> SessionView:
    """Produce a role-scoped view of a session record.

    Args:
        record: Stored session record.
        role: Viewer role ("Learner", "Parent" or "Teacher").
        policy: Visibility policy of the record's learner.

    Returns:
        Sanitized full view, or an empty view with the access-denied note.
    """
    if not can_view(role, policy):
        return SessionView(
            session_id=record.session_id,
            learner_id=record.learner_id,
            goal=None,
            created_at_iso=None,
            visibility_note=ACCESS_DENIED_NOTE,
        )

    return SessionView(
        session_id=record.session_id,
        learner_id=record.learner_id,
        goal=record.goal,
        created_at_iso=record.created_at_iso,
        tutor_turns=tuple(record.tutor_turns),
        observations=tuple(record.observations),
        session_trace=sanitize_trace(record.session_trace),
    )


def filter_learner_state_for_viewer(
    state: StoredLearnerState,
    role: ViewerRole | str,
    policy: VisibilityPolicy,
) -> LearnerStateView:
    """Produce a role-scoped view of a learner's state.

    Args:
        state: Stored learner state.
        role: Viewer role ("Learner", "Parent" or "Teacher").
        policy: Visibility policy of the learner.

    Returns:
        Sanitized full view, or an empty view with the access-denied note.
    """
    if not can_view(role, policy):
        return LearnerStateView(
            learner_id=state.learner_id,
            visibility_note=ACCESS_DENIED_NOTE,
        )

    return LearnerStateView(
        learner_id=state.learner_id,
        learner_profile=state.learner_profile,
        skill_graph=state.skill_graph.copy(),
        version=state.version,
        kernel_runs=tuple(sanitize_kernel_run(run) for run in state.kernel_runs),
    )
