# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dialogue Turn Planner.

Decides, for one learner utterance, what the tutor does next: which
scaffold step to take, what to say, which questions to ask, and which
learning-process observations the utterance provides.

Routing order:
1. Guardrails (refuse the turn outright)
2. Solution request (reveal only when earned, otherwise a hint)
3. Attempt (ask for reasoning, then hint or counterexample)
4. Clarifying question (stay on the current step)
5. Default advance along the ladder

The planner is pure apart from the timestamp: the input state is never
mutated and the same inputs always produce the same plan.
"""

import logging
from datetime import datetime

from src.core.config.settings import CONTRACTS_VERSION
from src.core.dialogue.constants import (
    ActionType,
    DialogueLimits,
    RefusalReason,
    ScaffoldStep,
    TutorMode,
)
from src.core.dialogue.guardrails import evaluate_guardrails
from src.core.dialogue.intents import (
    UtteranceIntent,
    classify_utterance,
    extract_observations,
    uncertainty_note,
)
from src.core.dialogue.ladder import can_reveal_solution, can_transition_to, default_successor
from src.core.dialogue.models import (
    ContextFlags,
    DialogueState,
    DialogueTurn,
    TurnAction,
    TurnPlan,
    TurnPlanResult,
)
from src.core.learner.models import LearnerProfile
from src.utils.datetime import iso_timestamp

logger = logging.getLogger(__name__)

# Message skeleton and questions per step; {topic} and {goal} are filled in
STEP_TEMPLATES: dict[ScaffoldStep, tuple[str, tuple[str, ...]]] = {
    ScaffoldStep.CLARIFY_GOAL: (
        "Let's start by pinning down what you want to get out of {topic}.",
        ("In your own words, what are you trying to figure out about {topic}?",),
    ),
    ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE: (
        "Before we dive in, let's see what you already know about {topic}.",
        (
            "What do you already know about {topic}?",
            "Where have you seen something like this before?",
        ),
    ),
    ScaffoldStep.ASK_FOR_ATTEMPT: (
        "Give it a try. Even a rough first step tells us a lot.",
        ("How would you start on {goal}?",),
    ),
    ScaffoldStep.ASK_FOR_REASONING: (
        "Walk me through your thinking.",
        (
            "Why do you think that step works?",
            "What made you choose that approach?",
        ),
    ),
    ScaffoldStep.OFFER_HINT: (
        "Here is a hint: focus on the key idea behind {topic} and check each "
        "step you take against it.",
        ("What changes when you apply that idea to your next step?",),
    ),
    ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST: (
        "Let's test your idea on a case where it might not hold.",
        ("Does your approach still work for that case?",),
    ),
    ScaffoldStep.REVEAL_MINIMAL_SOLUTION: (
        "You have put real effort into this, so here is a minimal worked "
        "solution path for {goal}, covering only the steps you still need.",
        ("Which step would you have done differently?",),
    ),
    ScaffoldStep.REFLECT_AND_GENERALIZE: (
        "Let's step back and look at what you learned.",
        ("Where else could you use this idea?",),
    ),
}

NEXT_LEARNER_ACTIONS: dict[ScaffoldStep, str] = {
    ScaffoldStep.CLARIFY_GOAL: "Describe what you want to figure out",
    ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE: "Share what you already know",
    ScaffoldStep.ASK_FOR_ATTEMPT: "Try a first step",
    ScaffoldStep.ASK_FOR_REASONING: "Explain your reasoning",
    ScaffoldStep.OFFER_HINT: "Use the hint and try again",
    ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST: "Test your idea on the new case",
    ScaffoldStep.REVEAL_MINIMAL_SOLUTION: "Compare the worked path with your attempt",
    ScaffoldStep.REFLECT_AND_GENERALIZE: "Name another place this idea applies",
}

MODE_OPENERS: dict[TutorMode, str] = {
    TutorMode.SOCRATIC: "",
    TutorMode.EXAMINER: "Let's check what you can do on your own. ",
    TutorMode.COACH: "You're leading this one. ",
}

REFUSAL_MESSAGES: dict[RefusalReason, str] = {
    RefusalReason.AGE_BAND_RESTRICTION: (
        "This kind of check-in needs a teacher present for learners in this "
        "age group. We can keep exploring together in guided mode instead."
    ),
    RefusalReason.HIGH_STAKES_CHEATING_ATTEMPT: (
        "I can't help while a high-stakes assessment is in progress unless a "
        "teacher is present. Let's pick this up once it is over."
    ),
    RefusalReason.CONTRACT_VERSION_MISMATCH: (
        "This session was saved in an older format and can't be continued. "
        "Please start a new session."
    ),
}

REFUSAL_LEARNER_ACTION = "Ask a teacher to join, or switch to guided practice"

REDIRECT_PREFIX = "Let's work toward it together first. "

STEP_ACTIONS: dict[ScaffoldStep, ActionType] = {
    ScaffoldStep.OFFER_HINT: ActionType.OFFER_HINT,
    ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST: ActionType.OFFER_COUNTEREXAMPLE,
    ScaffoldStep.REVEAL_MINIMAL_SOLUTION: ActionType.REVEAL_SOLUTION,
}


def create_dialogue_state(
    session_id: str,
    learner_profile: LearnerProfile,
    topic: str,
    goal: str,
    mode: TutorMode = TutorMode.SOCRATIC,
    context_flags: ContextFlags | None = None,
    contracts_version: str = CONTRACTS_VERSION,
) -> DialogueState:
    """Create the state for a new session, positioned at ClarifyGoal.

    Args:
        session_id: Session identifier.
        learner_profile: Learner the session is for.
        topic: Topic being explored.
        goal: Learner's objective.
        mode: Tutor mode.
        context_flags: Situational flags for the first turn.
        contracts_version: Contract version to stamp on the state.

    Returns:
        Fresh DialogueState.
    """
    return DialogueState(
        session_id=session_id,
        learner_profile=learner_profile,
        mode=mode,
        topic=topic,
        goal=goal,
        context_flags=context_flags or ContextFlags(),
        contracts_version=contracts_version,
    )


def determine_next_step(state: DialogueState, intent: UtteranceIntent) -> ScaffoldStep:
    """Choose the scaffold step for this turn.

    ``state`` must already reflect this turn's attempt and request flags
    but not this turn's hint or counterexample counters.
    """
    current = state.current_step

    if intent.requests_solution:
        if can_reveal_solution(state):
            return ScaffoldStep.REVEAL_MINIMAL_SOLUTION
        return ScaffoldStep.OFFER_HINT

    if intent.is_attempt:
        if current == ScaffoldStep.ASK_FOR_REASONING:
            candidate = (
                ScaffoldStep.OFFER_HINT
                if state.hints_offered == 0
                else ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST
            )
        elif current == ScaffoldStep.REVEAL_MINIMAL_SOLUTION:
            candidate = ScaffoldStep.REFLECT_AND_GENERALIZE
        else:
            candidate = ScaffoldStep.ASK_FOR_REASONING
        if can_transition_to(current, candidate):
            return candidate

    if intent.is_question or intent.is_empty:
        return current

    return default_successor(state)


def _render_step(state: DialogueState, step: ScaffoldStep) -> tuple[str, tuple[str, ...]]:
    template, questions = STEP_TEMPLATES[step]
    fields = {"topic": state.topic, "goal": state.goal}
    return (
        template.format(**fields),
        tuple(question.format(**fields) for question in questions),
    )


def _with_uncertainties(message: str, uncertainties: list[str]) -> str:
    if not uncertainties:
        return message
    # Fixed length and leads the message, so trimming keeps the step prompt
    if len(uncertainties) == 1:
        acknowledgement = "You mentioned feeling uncertain, and that's okay."
    else:
        acknowledgement = (
            f"You mentioned feeling uncertain about {len(uncertainties)} things, "
            "and that's okay."
        )
    return f"{acknowledgement} {message}"


def _record_turn(state: DialogueState, plan: TurnPlan, timestamp: str) -> None:
    state.turn_count += 1
    state.history.append(
        DialogueTurn(
            turn_number=state.turn_count,
            tutor_message=plan.message,
            tutor_questions=plan.questions,
            scaffold_step=plan.scaffold_step,
            timestamp=timestamp,
            refused=plan.should_refuse,
        )
    )


def _refusal_plan(state: DialogueState, reason: RefusalReason) -> TurnPlan:
    return TurnPlan(
        mode=state.mode,
        message=REFUSAL_MESSAGES[reason],
        questions=(),
        scaffold_step=state.current_step,
        should_refuse=True,
        refusal_reason=reason,
        uncertainty_notes=tuple(state.uncertainties) or None,
        actions=(TurnAction(type=ActionType.NONE, detail=reason.value),),
        next_suggested_learner_action=REFUSAL_LEARNER_ACTION,
    )


def plan_next_turn(
    state: DialogueState,
    learner_utterance: str | None = None,
    now: datetime | None = None,
    expected_version: str = CONTRACTS_VERSION,
) -> TurnPlanResult:
    """Plan the tutor's next turn.

    Args:
        state: Current dialogue state (not mutated).
        learner_utterance: What the learner just said, if anything.
        now: Clock reading used only for timestamps.
        expected_version: Contract version the state must carry.

    Returns:
        TurnPlanResult with the plan, the new state and any observations.
    """
    timestamp = iso_timestamp(now)
    new_state = state.copy()

    refusal = evaluate_guardrails(new_state, expected_version)
    if refusal is not None:
        logger.info(
            "Refused turn %d of session %s: %s",
            new_state.turn_count + 1,
            new_state.session_id,
            refusal.value,
        )
        plan = _refusal_plan(new_state, refusal)
        _record_turn(new_state, plan, timestamp)
        return TurnPlanResult(plan=plan, new_state=new_state, observations=[])

    intent = classify_utterance(learner_utterance)
    observations = extract_observations(intent, new_state.session_id, timestamp)

    if intent.expresses_uncertainty and learner_utterance:
        note = uncertainty_note(learner_utterance)
        if note not in new_state.uncertainties:
            new_state.uncertainties.append(note)
        del new_state.uncertainties[: -DialogueLimits.MAX_UNCERTAINTIES]

    if intent.requests_solution:
        new_state.has_requested_solution = True
    if intent.is_attempt:
        new_state.has_made_attempt = True

    next_step = determine_next_step(new_state, intent)
    if next_step == ScaffoldStep.REVEAL_MINIMAL_SOLUTION and not can_reveal_solution(new_state):
        next_step = ScaffoldStep.OFFER_HINT

    if next_step == ScaffoldStep.OFFER_HINT:
        new_state.hints_offered += 1
    elif next_step == ScaffoldStep.OFFER_COUNTEREXAMPLE_OR_TEST:
        new_state.counterexamples_offered += 1

    message, questions = _render_step(new_state, next_step)
    if intent.requests_solution and next_step != ScaffoldStep.REVEAL_MINIMAL_SOLUTION:
        message = REDIRECT_PREFIX + message
    message = MODE_OPENERS[new_state.mode] + message
    message = _with_uncertainties(message, new_state.uncertainties)

    action_type = STEP_ACTIONS.get(next_step, ActionType.NONE)
    plan = TurnPlan(
        mode=new_state.mode,
        message=message,
        questions=questions,
        scaffold_step=next_step,
        uncertainty_notes=tuple(new_state.uncertainties) or None,
        actions=(TurnAction(type=action_type),),
        next_suggested_learner_action=NEXT_LEARNER_ACTIONS[next_step],
    )

    if next_step != state.current_step:
        logger.debug(
            "Session %s moved from %s to %s",
            new_state.session_id,
            state.current_step.value,
            next_step.value,
        )
    new_state.current_step = next_step
    _record_turn(new_state, plan, timestamp)

    return TurnPlanResult(plan=plan, new_state=new_state, observations=observations)
