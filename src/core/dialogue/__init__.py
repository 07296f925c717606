# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dialogue Turn Planner.

Key Components:
- DialogueState: Per-session scaffold position, counters and history
- plan_next_turn: Guardrails, ladder routing and observation extraction
- SCAFFOLD_LADDER: Rung definitions and allowed transitions

Example usage:

    from src.core.dialogue import create_dialogue_state, plan_next_turn

    state = create_dialogue_state("s-1", profile, "Fractions", "Add fractions")
    result = plan_next_turn(state, "I think it's 3/4 because the halves match")
    state = result.new_state
"""

from src.core.dialogue.constants import (
    PUBLIC_REASON_CODES,
    ActionType,
    DialogueLimits,
    RefusalReason,
    ScaffoldStep,
    TutorMode,
)
from src.core.dialogue.guardrails import check_contract_version, evaluate_guardrails
from src.core.dialogue.intents import (
    UtteranceIntent,
    classify_utterance,
    extract_observations,
)
from src.core.dialogue.ladder import (
    SCAFFOLD_LADDER,
    ScaffoldStepDefinition,
    can_reveal_solution,
    can_transition_to,
    default_successor,
    get_step_definition,
)
from src.core.dialogue.models import (
    ContextFlags,
    DialogueState,
    DialogueTurn,
    TurnAction,
    TurnPlan,
    TurnPlanResult,
)
from src.core.dialogue.planner import (
    create_dialogue_state,
    determine_next_step,
    plan_next_turn,
)

__all__ = [
    # Planner
    "create_dialogue_state",
    "plan_next_turn",
    "determine_next_step",
    # Guardrails
    "evaluate_guardrails",
    "check_contract_version",
    # Intents
    "UtteranceIntent",
    "classify_utterance",
    "extract_observations",
    # Ladder
    "SCAFFOLD_LADDER",
    "ScaffoldStepDefinition",
    "get_step_definition",
    "can_transition_to",
    "can_reveal_solution",
    "default_successor",
    # Data structures
    "ContextFlags",
    "DialogueState",
    "DialogueTurn",
    "TurnAction",
    "TurnPlan",
    "TurnPlanResult",
    # Constants and enums
    "TutorMode",
    "ScaffoldStep",
    "RefusalReason",
    "ActionType",
    "DialogueLimits",
    "PUBLIC_REASON_CODES",
]
