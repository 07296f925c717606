# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session Orchestrator.

Composes one full learner turn:
1. Plan the tutor turn (guardrails first)
2. On refusal stop: no skill update, no assessment, prior graph returned
   by reference
3. Otherwise fold the emitted observations into the skill graph
4. Issue the requested assessment if the learner is eligible
5. Style the tutor turn for the learner's age band

Every call produces a SessionTrace whose inputs_hash depends only on the
request, so equal requests yield equal traces apart from the timestamp.

Example:
    >>> output = run_learning_session(request)
    >>> output = run_learning_session(
    ...     next_request,
    ...     previous_graph=output.skill_graph_delta.new_graph,
    ...     previous_state=output.dialogue_state,
    ... )
"""

from datetime import datetime
from functools import lru_cache
from pathlib import Path

from src.core.assessment.base import (
    AssessmentDescriptor,
    AssessmentGenerator,
    DescriptorAssessmentGenerator,
)
from src.core.assessment.eligibility import check_assessment_eligibility
from src.core.config.settings import Settings, get_settings
from src.core.dialogue.models import DialogueState
from src.core.dialogue.planner import create_dialogue_state, plan_next_turn
from src.core.exceptions import LearnerProfileMismatchError, SessionStateMismatchError
from src.core.learner.constants import AgeBand
from src.core.learner.models import CognitiveSkillGraph, create_empty_skill_graph
from src.core.learner.updater import apply_observations
from src.core.session.hashing import compute_inputs_hash
from src.core.session.models import (
    LearningSessionRequest,
    SessionOutput,
    SessionTrace,
    SkillGraphDelta,
)
from src.core.style.enforcer import apply_style_to_tutor_turn
from src.core.style.profiles import load_style_profiles, style_hint_for_profile
from src.utils.datetime import iso_timestamp
from src.utils.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=8)
def _style_profiles(path: Path | None) -> dict[AgeBand, str]:
    return load_style_profiles(path)


def create_session_state(
    request: LearningSessionRequest,
    contracts_version: str | None = None,
) -> DialogueState:
    """Create the dialogue state for the first turn of a session.

    Args:
        request: First request of the session.
        contracts_version: Version to stamp; defaults to the configured one.

    Returns:
        Fresh DialogueState at ClarifyGoal.
    """
    version = contracts_version or get_settings().tutoring.contracts_version
    return create_dialogue_state(
        session_id=request.session_id,
        learner_profile=request.learner,
        topic=request.goal.topic,
        goal=request.goal.objective,
        mode=request.mode,
        context_flags=request.context_flags,
        contracts_version=version,
    )


def _resume_state(request: LearningSessionRequest, previous_state: DialogueState) -> DialogueState:
    if previous_state.session_id != request.session_id:
        raise SessionStateMismatchError(request.session_id, previous_state.session_id)
    if previous_state.learner_profile != request.learner:
        raise LearnerProfileMismatchError(
            request.session_id,
            previous_state.learner_profile.learner_id,
            request.learner.learner_id,
        )

    state = previous_state.copy()
    state.mode = request.mode
    if request.context_flags is not None:
        state.context_flags = request.context_flags
    return state


def run_learning_session(
    request: LearningSessionRequest,
    previous_graph: CognitiveSkillGraph | None = None,
    previous_state: DialogueState | None = None,
    assessment_generator: AssessmentGenerator | None = None,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> SessionOutput:
    """Run one learner turn.

    Args:
        request: The learner's turn.
        previous_graph: Skill graph from the previous turn; an empty graph
            is used when omitted.
        previous_state: Dialogue state from the previous turn; a fresh
            state is created when omitted.
        assessment_generator: Generator used for eligible assessment
            requests; defaults to DescriptorAssessmentGenerator.
        now: Clock reading used only for timestamps.
        settings: Settings to use instead of the cached instance.

    Returns:
        SessionOutput for the turn.

    Raises:
        SessionStateMismatchError: If previous_state belongs to another
            session.
        LearnerProfileMismatchError: If the request carries a learner
            profile other than the one previous_state was created with.
    """
    bind_context(session_id=request.session_id, learner_id=request.learner.learner_id)
    try:
        return _orchestrate_turn(
            request, previous_graph, previous_state, assessment_generator, now, settings
        )
    finally:
        clear_context()


def _orchestrate_turn(
    request: LearningSessionRequest,
    previous_graph: CognitiveSkillGraph | None,
    previous_state: DialogueState | None,
    assessment_generator: AssessmentGenerator | None,
    now: datetime | None,
    settings: Settings | None,
) -> SessionOutput:
    settings = settings or get_settings()
    version = settings.tutoring.contracts_version
    timestamp = iso_timestamp(now)
    inputs_hash = compute_inputs_hash(request)

    graph = previous_graph
    if graph is None:
        graph = create_empty_skill_graph(request.learner.learner_id)

    if previous_state is None:
        state = create_session_state(request, version)
    else:
        state = _resume_state(request, previous_state)

    result = plan_next_turn(state, request.utterance, now=now, expected_version=version)
    plan = result.plan
    new_state = result.new_state

    if plan.should_refuse:
        reason = plan.refusal_reason.value if plan.refusal_reason else "Refused"
        logger.info(
            "session_turn_refused",
            reason=reason,
            turn_count=new_state.turn_count,
        )
        trace = SessionTrace(
            session_id=request.session_id,
            learner_id=request.learner.learner_id,
            timestamp_iso=timestamp,
            inputs_hash=inputs_hash,
            contracts_version=version,
            turn_count=new_state.turn_count,
            refusals=(reason,),
            notes=(f"Turn refused: {reason}",),
        )
        return SessionOutput(
            tutor_turn=plan,
            observations=[],
            skill_graph_delta=SkillGraphDelta(updates=[], new_graph=graph),
            assessment=None,
            session_trace=trace,
            dialogue_state=new_state,
        )

    update = apply_observations(request.learner, graph, result.observations)
    refusals: list[str] = []
    notes = [
        f"Scaffold step: {plan.scaffold_step.value}",
        f"Skill updates: {len(update.audit)} from {len(result.observations)} observations",
    ]

    assessment: AssessmentDescriptor | None = None
    if request.requested_assessment is not None:
        withheld = check_assessment_eligibility(
            request.learner,
            request.requested_assessment,
            new_state.context_flags,
        )
        if withheld is not None:
            refusals.append(withheld.value)
            notes.append(f"Assessment withheld: {withheld.value}")
        else:
            generator = assessment_generator or DescriptorAssessmentGenerator()
            assessment = generator.generate(
                request.requested_assessment,
                session_id=request.session_id,
                learner=request.learner,
                topic=request.goal.topic,
                objective=request.goal.objective,
                contracts_version=version,
            )
            notes.append(f"Assessment issued: {assessment.type.value}")

    if settings.tutoring.apply_age_band_style:
        profiles = _style_profiles(settings.tutoring.style_profiles_path)
        hint = style_hint_for_profile(
            request.learner,
            calm_mode=new_state.context_flags.calm_mode,
            profiles=profiles,
        )
        plan = apply_style_to_tutor_turn(plan, hint)

    trace = SessionTrace(
        session_id=request.session_id,
        learner_id=request.learner.learner_id,
        timestamp_iso=timestamp,
        inputs_hash=inputs_hash,
        contracts_version=version,
        turn_count=new_state.turn_count,
        refusals=tuple(refusals),
        notes=tuple(notes),
        assessment_generated=assessment is not None,
        skill_updates_count=len(update.audit),
    )

    logger.debug(
        "session_turn_completed",
        scaffold_step=plan.scaffold_step.value,
        observations=len(result.observations),
        skill_updates=len(update.audit),
        assessment_generated=assessment is not None,
    )

    return SessionOutput(
        tutor_turn=plan,
        observations=list(result.observations),
        skill_graph_delta=SkillGraphDelta(updates=list(update.audit), new_graph=update.graph),
        assessment=assessment,
        session_trace=trace,
        dialogue_state=new_state,
    )
