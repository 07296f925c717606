# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dialogue state and turn plan data structures.

DialogueState is created on the first turn and threaded by the caller
from turn to turn; the planner never mutates the state it is given and
returns a fresh copy instead.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from src.core.config.settings import CONTRACTS_VERSION
from src.core.dialogue.constants import (
    ActionType,
    DialogueLimits,
    RefusalReason,
    ScaffoldStep,
    TutorMode,
)
from src.core.learner.models import LearnerProfile, LearningSessionObservation


class ContextFlags(BaseModel):
    """Situational flags supplied with a request.

    Attributes:
        is_teacher_present: A teacher is supervising the session.
        is_high_stakes_assessment: The learner is sitting a high-stakes test.
        calm_mode: Prefer a calmer, single-question tutor style.
    """

    model_config = ConfigDict(frozen=True)

    is_teacher_present: bool | None = None
    is_high_stakes_assessment: bool | None = None
    calm_mode: bool = False

    @property
    def teacher_present(self) -> bool:
        """Check if a teacher is explicitly present."""
        return self.is_teacher_present is True


@dataclass(frozen=True)
class DialogueTurn:
    """One tutor turn as recorded in history."""

    turn_number: int
    tutor_message: str
    tutor_questions: tuple[str, ...]
    scaffold_step: ScaffoldStep
    timestamp: str
    refused: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "turn_number": self.turn_number,
            "tutor_message": self.tutor_message,
            "tutor_questions": list(self.tutor_questions),
            "scaffold_step": self.scaffold_step.value,
            "timestamp": self.timestamp,
            "refused": self.refused,
        }


def _history_ring(turns: Any = ()) -> deque[DialogueTurn]:
    return deque(turns, maxlen=DialogueLimits.MAX_HISTORY_TURNS)


@dataclass
class DialogueState:
    """Per-session Socratic dialogue state.

    Attributes:
        session_id: Owning session.
        learner_profile: Snapshot of the learner profile.
        mode: Tutor mode for the session.
        topic: Topic being explored.
        goal: Learner's objective.
        current_step: Current scaffold step.
        has_made_attempt: The learner has attempted the problem.
        has_requested_solution: The learner has asked to be told the answer.
        hints_offered: Number of hints offered so far.
        counterexamples_offered: Number of counterexamples or tests offered.
        uncertainties: Unresolved uncertainties, echoed on every turn.
        context_flags: Situational flags for the current turn.
        history: Ring of the most recent tutor turns.
        turn_count: Total turns planned, including refused ones.
        contracts_version: Contract version the state was created under.
    """

    session_id: str
    learner_profile: LearnerProfile
    mode: TutorMode
    topic: str
    goal: str
    current_step: ScaffoldStep = ScaffoldStep.CLARIFY_GOAL
    has_made_attempt: bool = False
    has_requested_solution: bool = False
    hints_offered: int = 0
    counterexamples_offered: int = 0
    uncertainties: list[str] = field(default_factory=list)
    context_flags: ContextFlags = field(default_factory=ContextFlags)
    history: deque[DialogueTurn] = field(default_factory=_history_ring)
    turn_count: int = 0
    contracts_version: str = CONTRACTS_VERSION

    def __post_init__(self) -> None:
        if (
            not isinstance(self.history, deque)
            or self.history.maxlen != DialogueLimits.MAX_HISTORY_TURNS
        ):
            self.history = _history_ring(self.history)

    @property
    def scaffolding_offered(self) -> int:
        """Total hints and counterexamples offered."""
        return self.hints_offered + self.counterexamples_offered

    def copy(self) -> "DialogueState":
        """Return an independent copy (profile and flags are immutable)."""
        return DialogueState(
            session_id=self.session_id,
            learner_profile=self.learner_profile,
            mode=self.mode,
            topic=self.topic,
            goal=self.goal,
            current_step=self.current_step,
            has_made_attempt=self.has_made_attempt,
            has_requested_solution=self.has_requested_solution,
            hints_offered=self.hints_offered,
            counterexamples_offered=self.counterexamples_offered,
            uncertainties=list(self.uncertainties),
            context_flags=self.context_flags,
            history=_history_ring(self.history),
            turn_count=self.turn_count,
            contracts_version=self.contracts_version,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "session_id": self.session_id,
            "learner_profile": self.learner_profile.model_dump(mode="json"),
            "mode": self.mode.value,
            "topic": self.topic,
            "goal": self.goal,
            "current_step": self.current_step.value,
            "has_made_attempt": self.has_made_attempt,
            "has_requested_solution": self.has_requested_solution,
            "hints_offered": self.hints_offered,
            "counterexamples_offered": self.counterexamples_offered,
            "uncertainties": list(self.uncertainties),
            "context_flags": self.context_flags.model_dump(mode="json"),
            "history": [turn.to_dict() for turn in self.history],
            "turn_count": self.turn_count,
            "contracts_version": self.contracts_version,
        }


@dataclass(frozen=True)
class TurnAction:
    """A tagged tutor action."""

    type: ActionType
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"type": self.type.value, "detail": self.detail}


@dataclass(frozen=True)
class TurnPlan:
    """What the tutor should do next.

    Attributes:
        mode: Tutor mode the plan was made in.
        message: Tutor message skeleton for the prose layer.
        questions: Questions to pose to the learner.
        scaffold_step: Scaffold step of this turn.
        should_refuse: A guardrail refused the turn.
        refusal_reason: Why the turn was refused.
        uncertainty_notes: Unresolved uncertainties, if any.
        actions: Tagged actions taken this turn.
        next_suggested_learner_action: Short prompt for the learner.
    """

    mode: TutorMode
    message: str
    questions: tuple[str, ...]
    scaffold_step: ScaffoldStep
    should_refuse: bool = False
    refusal_reason: RefusalReason | None = None
    uncertainty_notes: tuple[str, ...] | None = None
    actions: tuple[TurnAction, ...] = ()
    next_suggested_learner_action: str = ""

    def has_action(self, action_type: ActionType) -> bool:
        """Check if the plan carries an action of the given type."""
        return any(action.type == action_type for action in self.actions)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "mode": self.mode.value,
            "message": self.message,
            "questions": list(self.questions),
            "scaffold_step": self.scaffold_step.value,
            "should_refuse": self.should_refuse,
            "refusal_reason": self.refusal_reason.value if self.refusal_reason else None,
            "uncertainty_notes": (
                list(self.uncertainty_notes) if self.uncertainty_notes is not None else None
            ),
            "actions": [action.to_dict() for action in self.actions],
            "next_suggested_learner_action": self.next_suggested_learner_action,
        }


@dataclass
class TurnPlanResult:
    """Planner output: the plan, the next state and emitted observations."""

    plan: TurnPlan
    new_state: DialogueState
    observations: list[LearningSessionObservation] = field(default_factory=list)
