# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Stored record types for the bounded learning store.

Records hold immutable parts (turns, observations, traces, kernel runs)
in plain lists; copy() gives an independent record that can be mutated
without touching what the store holds.
"""

from dataclasses import dataclass, field
from typing import Any

from src.core.config.settings import CONTRACTS_VERSION
from src.core.dialogue.models import DialogueTurn
from src.core.learner.models import (
    CognitiveSkillGraph,
    LearnerProfile,
    LearningSessionObservation,
)
from src.core.session.models import LearningGoal, SessionTrace


@dataclass(frozen=True)
class KernelDecision:
    """Outcome selected by a decision kernel run."""

    outcome_id: str
    label: str
    confidence: str
    rationale: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "outcome_id": self.outcome_id,
            "label": self.label,
            "confidence": self.confidence,
            "rationale": self.rationale,
        }


@dataclass(frozen=True)
class KernelTraceNode:
    """One step in a kernel run's audit trace."""

    id: str
    type: str
    label: str
    description: str
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "description": self.description,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class KernelRunRecord:
    """Record of one decision-kernel run kept on a learner's state.

    Kernel runs are produced outside this core; the store only keeps a
    bounded window of them and the visibility filters sanitize their
    traces.
    """

    run_id: str
    kernel_id: str
    adapter_id: str
    learner_id: str
    created_at_iso: str
    input_hash: str
    decision: KernelDecision
    claims: tuple[str, ...] = ()
    trace: tuple[KernelTraceNode, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "run_id": self.run_id,
            "kernel_id": self.kernel_id,
            "adapter_id": self.adapter_id,
            "learner_id": self.learner_id,
            "created_at_iso": self.created_at_iso,
            "input_hash": self.input_hash,
            "decision": self.decision.to_dict(),
            "claims": list(self.claims),
            "trace": [node.to_dict() for node in self.trace],
        }


@dataclass
class StoredSessionRecord:
    """One session as held by the store.

    Attributes:
        session_id: Session id (store key).
        learner_id: Owning learner.
        goal: Learning goal of the session.
        tutor_turns: Most recent tutor turns, oldest first.
        observations: Most recent observations, oldest first.
        session_trace: Trace of the latest turn, if any.
        created_at_iso: Creation time.
        internal_notes: Operator-only notes, never exposed to viewers.
    """

    session_id: str
    learner_id: str
    goal: LearningGoal
    created_at_iso: str
    tutor_turns: list[DialogueTurn] = field(default_factory=list)
    observations: list[LearningSessionObservation] = field(default_factory=list)
    session_trace: SessionTrace | None = None
    internal_notes: list[str] = field(default_factory=list)

    def copy(self) -> "StoredSessionRecord":
        """Return an independent copy."""
        return StoredSessionRecord(
            session_id=self.session_id,
            learner_id=self.learner_id,
            goal=self.goal,
            created_at_iso=self.created_at_iso,
            tutor_turns=list(self.tutor_turns),
            observations=list(self.observations),
            session_trace=self.session_trace,
            internal_notes=list(self.internal_notes),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "session_id": self.session_id,
            "learner_id": self.learner_id,
            "goal": self.goal.model_dump(mode="json"),
            "created_at_iso": self.created_at_iso,
            "tutor_turns": [turn.to_dict() for turn in self.tutor_turns],
            "observations": [obs.to_dict() for obs in self.observations],
            "session_trace": self.session_trace.to_dict() if self.session_trace else None,
            "internal_notes": list(self.internal_notes),
        }


@dataclass
class StoredLearnerState:
    """A learner's persisted state, one record per learner.

    Attributes:
        learner_profile: Latest learner profile.
        skill_graph: Latest skill graph.
        version: Contract version the state was written under.
        updated_at_iso: Last write time.
        kernel_runs: Most recent kernel runs, oldest first.
        internal_notes: Operator-only notes, never exposed to viewers.
    """

    learner_profile: LearnerProfile
    skill_graph: CognitiveSkillGraph
    version: str = CONTRACTS_VERSION
    updated_at_iso: str | None = None
    kernel_runs: list[KernelRunRecord] = field(default_factory=list)
    internal_notes: list[str] = field(default_factory=list)

    @property
    def learner_id(self) -> str:
        """Learner id (store key)."""
        return self.learner_profile.learner_id

    def copy(self) -> "StoredLearnerState":
        """Return an independent copy."""
        return StoredLearnerState(
            learner_profile=self.learner_profile,
            skill_graph=self.skill_graph.copy(),
            version=self.version,
            updated_at_iso=self.updated_at_iso,
            kernel_runs=list(self.kernel_runs),
            internal_notes=list(self.internal_notes),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "learner_profile": self.learner_profile.model_dump(mode="json"),
            "skill_graph": self.skill_graph.to_dict(),
            "version": self.version,
            "updated_at_iso": self.updated_at_iso,
            "kernel_runs": [run.to_dict() for run in self.kernel_runs],
            "internal_notes": list(self.internal_notes),
        }
