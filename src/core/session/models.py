# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session request and output types.

LearningSessionRequest is the boundary type a transport layer builds and
is validated with pydantic. SessionOutput and its parts are plain
dataclasses produced by the orchestrator.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.assessment.base import AssessmentDescriptor, AssessmentType
from src.core.dialogue.constants import TutorMode
from src.core.dialogue.models import ContextFlags, DialogueState, TurnPlan
from src.core.learner.models import (
    CognitiveSkillGraph,
    LearnerProfile,
    LearningSessionObservation,
    SkillAuditEntry,
)


class LearningGoal(BaseModel):
    """What the learner wants to learn."""

    model_config = ConfigDict(frozen=True)

    subject: str
    topic: str
    objective: str


class LearningSessionRequest(BaseModel):
    """One learner turn, as received from the transport layer.

    Attributes:
        session_id: Session the turn belongs to.
        learner: Learner profile.
        goal: Learning goal.
        mode: Tutor mode.
        utterance: What the learner said, if anything.
        requested_assessment: Assessment format requested for this turn.
        context_flags: Situational flags for this turn.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(min_length=1)
    learner: LearnerProfile
    goal: LearningGoal
    mode: TutorMode = TutorMode.SOCRATIC
    utterance: str | None = None
    requested_assessment: AssessmentType | None = None
    context_flags: ContextFlags | None = None


@dataclass(frozen=True)
class SessionTrace:
    """Hashable record of one orchestrated turn.

    Attributes:
        session_id: Session id.
        learner_id: Learner id.
        timestamp_iso: Time the turn was orchestrated.
        inputs_hash: SHA-256 over the canonical request fields.
        contracts_version: Contract version of the producing core.
        turn_count: Dialogue turn count after this turn.
        refusals: Refusal reason codes raised this turn.
        notes: Human-readable notes about the turn.
        assessment_generated: An assessment descriptor was produced.
        skill_updates_count: Number of skill audit entries.
    """

    session_id: str
    learner_id: str
    timestamp_iso: str
    inputs_hash: str
    contracts_version: str
    turn_count: int
    refusals: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    assessment_generated: bool = False
    skill_updates_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "session_id": self.session_id,
            "learner_id": self.learner_id,
            "timestamp_iso": self.timestamp_iso,
            "inputs_hash": self.inputs_hash,
            "contracts_version": self.contracts_version,
            "turn_count": self.turn_count,
            "refusals": list(self.refusals),
            "notes": list(self.notes),
            "assessment_generated": self.assessment_generated,
            "skill_updates_count": self.skill_updates_count,
        }


@dataclass
class SkillGraphDelta:
    """Skill changes made this turn."""

    updates: list[SkillAuditEntry]
    new_graph: CognitiveSkillGraph

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "updates": [entry.to_dict() for entry in self.updates],
            "new_graph": self.new_graph.to_dict(),
        }


@dataclass
class SessionOutput:
    """Everything one orchestrated turn produces.

    Attributes:
        tutor_turn: Planned (and styled) tutor turn.
        observations: Observations emitted by the planner.
        skill_graph_delta: Audit entries and the resulting graph.
        assessment: Issued assessment, or None.
        session_trace: Trace of the turn.
        dialogue_state: State to thread into the next turn.
    """

    tutor_turn: TurnPlan
    skill_graph_delta: SkillGraphDelta
    session_trace: SessionTrace
    dialogue_state: DialogueState
    observations: list[LearningSessionObservation] = field(default_factory=list)
    assessment: AssessmentDescriptor | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tutor_turn": self.tutor_turn.to_dict(),
            "observations": [obs.to_dict() for obs in self.observations],
            "skill_graph_delta": self.skill_graph_delta.to_dict(),
            "assessment": self.assessment.to_dict() if self.assessment else None,
            "session_trace": self.session_trace.to_dict(),
            "dialogue_state": self.dialogue_state.to_dict(),
        }
