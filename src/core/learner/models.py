# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner and skill model data structures.

LearnerProfile is supplied by the caller and validated at the boundary
(pydantic). Skill graph state is owned by the updater and kept in plain
dataclasses with fixed-capacity deques, so the signal bound holds by
construction.

Shared between:
- Dialogue Turn Planner (produces LearningSessionObservation)
- Skill Graph Updater (folds observations into CognitiveSkillGraph)
- Session Orchestrator and Bounded Store (carry and persist both)
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.learner.constants import (
    AgeBand,
    CognitiveSkillId,
    ConfidenceBand,
    ObservationType,
    SkillThresholds,
)


class SafetyFlags(BaseModel):
    """Safety context for a learner."""

    model_config = ConfigDict(frozen=True)

    minor: bool
    institution_mode: bool = False


class LearnerProfile(BaseModel):
    """Learner profile, immutable for the duration of a session."""

    model_config = ConfigDict(frozen=True)

    learner_id: str = Field(min_length=1)
    age_band: AgeBand
    safety: SafetyFlags

    @property
    def is_minor(self) -> bool:
        """Check if the learner is flagged as a minor."""
        return self.safety.minor


@dataclass(frozen=True)
class LearningSessionObservation:
    """A single learning-process observation emitted by the planner.

    Attributes:
        type: What kind of process was observed.
        timestamp: ISO 8601 time the observation was made.
        strength: Strength of the lexical evidence (0-1).
        session_id: Session the observation belongs to.
        skill_hint: Optional CognitiveSkillId value routing the observation.
    """

    type: ObservationType
    timestamp: str
    strength: float
    session_id: str
    skill_hint: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"Observation strength must be within [0, 1], got {self.strength}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "timestamp": self.timestamp,
            "strength": self.strength,
            "session_id": self.session_id,
            "skill_hint": self.skill_hint,
        }


def _signal_ring(values: Any = ()) -> deque[float]:
    return deque(values, maxlen=SkillThresholds.MAX_RECENT_SIGNALS)


@dataclass(frozen=True)
class SkillStateSnapshot:
    """Point-in-time view of a SkillState, used in audit entries."""

    exposures: int
    confidence_band: ConfidenceBand
    recent_signal_count: int
    mean_signal: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "exposures": self.exposures,
            "confidence_band": self.confidence_band.value,
            "recent_signal_count": self.recent_signal_count,
            "mean_signal": self.mean_signal,
        }


@dataclass
class SkillState:
    """Evidence gathered for one cognitive skill.

    Attributes:
        exposures: Monotonic count of observations routed to this skill.
        confidence_band: Derived band, recomputed by the updater only.
        recent_signals: Ring of the most recent admitted strengths.
    """

    exposures: int = 0
    confidence_band: ConfidenceBand = ConfidenceBand.LOW
    recent_signals: deque[float] = field(default_factory=_signal_ring)

    def __post_init__(self) -> None:
        if (
            not isinstance(self.recent_signals, deque)
            or self.recent_signals.maxlen != SkillThresholds.MAX_RECENT_SIGNALS
        ):
            self.recent_signals = _signal_ring(self.recent_signals)

    @property
    def mean_signal(self) -> float:
        """Mean of recent signals, 0.0 when there are none."""
        if not self.recent_signals:
            return 0.0
        return sum(self.recent_signals) / len(self.recent_signals)

    def copy(self) -> "SkillState":
        """Return an independent copy."""
        return SkillState(
            exposures=self.exposures,
            confidence_band=self.confidence_band,
            recent_signals=_signal_ring(self.recent_signals),
        )

    def snapshot(self) -> SkillStateSnapshot:
        """Return an immutable snapshot for auditing."""
        return SkillStateSnapshot(
            exposures=self.exposures,
            confidence_band=self.confidence_band,
            recent_signal_count=len(self.recent_signals),
            mean_signal=round(self.mean_signal, 4),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "exposures": self.exposures,
            "confidence_band": self.confidence_band.value,
            "recent_signals": list(self.recent_signals),
        }


@dataclass
class CognitiveSkillGraph:
    """Per-learner mapping from skill id to skill state."""

    learner_id: str
    skills: dict[CognitiveSkillId, SkillState] = field(default_factory=dict)

    def get(self, skill_id: CognitiveSkillId) -> SkillState | None:
        """Get the state of a skill, if tracked."""
        return self.skills.get(skill_id)

    def copy(self) -> "CognitiveSkillGraph":
        """Return a deep, independent copy."""
        return CognitiveSkillGraph(
            learner_id=self.learner_id,
            skills={skill_id: state.copy() for skill_id, state in self.skills.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (skills in enum order)."""
        return {
            "learner_id": self.learner_id,
            "skills": {
                skill_id.value: self.skills[skill_id].to_dict()
                for skill_id in CognitiveSkillId
                if skill_id in self.skills
            },
        }


def create_empty_skill_graph(learner_id: str) -> CognitiveSkillGraph:
    """Create a graph with every known skill at zero exposures, Low band."""
    return CognitiveSkillGraph(
        learner_id=learner_id,
        skills={skill_id: SkillState() for skill_id in CognitiveSkillId},
    )


@dataclass(frozen=True)
class SkillAuditEntry:
    """Explains one mutation of one skill.

    Attributes:
        skill_id: Skill that changed.
        action: Short action label ("Added signal", ...).
        reason: Human-readable explanation.
        previous_state: Snapshot before the mutation.
        new_state: Snapshot after the mutation.
    """

    skill_id: CognitiveSkillId
    action: str
    reason: str
    previous_state: SkillStateSnapshot
    new_state: SkillStateSnapshot

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "skill_id": self.skill_id.value,
            "action": self.action,
            "reason": self.reason,
            "previous_state": self.previous_state.to_dict(),
            "new_state": self.new_state.to_dict(),
        }
