# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Socratic scaffold ladder.

Each rung declares the rungs it may advance to and what must already be
true of the dialogue before the tutor moves onto it. The planner uses the
ladder for its default advance; solution requests and attempts are
routed by explicit rules in the planner.
"""

from dataclasses import dataclass

from src.core.dialogue.constants import ScaffoldStep
from src.core.dialogue.models import DialogueState


@dataclass(frozen=True)
class ScaffoldStepDefinition:
    """Definition of one ladder rung.

    Attributes:
        step: The rung.
        can_advance_to: Successors in preference order.
        requires_attempt: Learner must have attempted before this rung.
        requires_scaffolding: A hint or counterexample must have been offered.
    """

    step: ScaffoldStep
    can_advance_to: tuple[ScaffoldStep, ...]
    requires_attempt: bool = False
    requires_scaffolding: bool = False


SCAFFOLD_LADDER: dict[ScaffoldStep, ScaffoldStepDefinition] = {
    ScaffoldStep.CLARIFY_GOAL: ScaffoldStepDefinition(
        step=ScaffoldStep.CLARIFY_GOAL,
        can_advance_to=(ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE,),
    ),
    ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE: ScaffoldStepDefinition(
        step=ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE,
        can_advance_to=(ScaffoldStep.ASK_FOR_ATTEMPT, ScaffoldStep.CLARIFY_GOAL),
    ),
    ScaffoldStep.ASK_FOR_ATTEMPT: ScaffoldStepDefinition(
        step=ScaffoldStep.ASK_FOR_ATTEMPT,
        can_advance_to=(
            ScaffoldStep.ASK_FOR_REASONING,
            ScaffoldStep.OFFER_HINT,
            ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE,
        ),
    ),
    ScaffoldStep.ASK_FOR_REASONING: ScaffoldStepDefinition(
        step=ScaffoldStep.ASK_FOR_REASONING,
        can_advance_to=(
            ScaffoldStep.OFFER_HINT,
            ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST,
            ScaffoldStep.ASK_FOR_ATTEMPT,
        ),
        requires_attempt=True,
    ),
    ScaffoldStep.OFFER_HINT: ScaffoldStepDefinition(
        step=ScaffoldStep.OFFER_HINT,
        can_advance_to=(
            ScaffoldStep.ASK_FOR_REASONING,
            ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST,
            ScaffoldStep.ASK_FOR_ATTEMPT,
            ScaffoldStep.REVEAL_MINIMAL_SOLUTION,
        ),
    ),
    ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST: ScaffoldStepDefinition(
        step=ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST,
        can_advance_to=(
            ScaffoldStep.ASK_FOR_REASONING,
            ScaffoldStep.OFFER_HINT,
            ScaffoldStep.REVEAL_MINIMAL_SOLUTION,
        ),
        requires_attempt=True,
    ),
    ScaffoldStep.REVEAL_MINIMAL_SOLUTION: ScaffoldStepDefinition(
        step=ScaffoldStep.REVEAL_MINIMAL_SOLUTION,
        can_advance_to=(ScaffoldStep.REFLECT_AND_GENERALIZE,),
        requires_attempt=True,
        requires_scaffolding=True,
    ),
    ScaffoldStep.REFLECT_AND_GENERALIZE: ScaffoldStepDefinition(
        step=ScaffoldStep.REFLECT_AND_GENERALIZE,
        can_advance_to=(),
    ),
}


def get_step_definition(step: ScaffoldStep) -> ScaffoldStepDefinition:
    """Get the ladder definition of a rung."""
    return SCAFFOLD_LADDER[step]


def can_transition_to(from_step: ScaffoldStep, to_step: ScaffoldStep) -> bool:
    """Check if the ladder allows moving directly between two rungs."""
    return to_step == from_step or to_step in SCAFFOLD_LADDER[from_step].can_advance_to


def can_reveal_solution(state: DialogueState) -> bool:
    """Check if a minimal solution may be revealed.

    The learner must have attempted the problem and at least one hint or
    counterexample must already have been offered.
    """
    return state.has_made_attempt and state.scaffolding_offered > 0


def requirements_met(state: DialogueState, step: ScaffoldStep) -> bool:
    """Check if the dialogue satisfies a rung's entry requirements."""
    definition = SCAFFOLD_LADDER[step]
    if definition.requires_attempt and not state.has_made_attempt:
        return False
    if definition.requires_scaffolding and state.scaffolding_offered == 0:
        return False
    return True


def default_successor(state: DialogueState) -> ScaffoldStep:
    """Pick the next rung when the learner's turn carries no special intent.

    Returns the first successor whose requirements are met, never the
    reveal rung; stays put when none qualifies.
    """
    for candidate in SCAFFOLD_LADDER[state.current_step].can_advance_to:
        if candidate == ScaffoldStep.REVEAL_MINIMAL_SOLUTION:
            continue
        if requirements_met(state, candidate):
            return candidate
    return state.current_step
