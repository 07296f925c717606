# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project orchestrator output into the bounded store."""

from src.core.dialogue.models import DialogueTurn
from src.core.exceptions import StoreValidationError
from src.core.learner.models import LearnerProfile, create_empty_skill_graph
from src.core.session.models import LearningSessionRequest, SessionOutput
from src.core.store.memory_store import InMemoryLearningStore
from src.core.store.models import KernelRunRecord, StoredLearnerState, StoredSessionRecord


def record_session_turn(
    store: InMemoryLearningStore,
    request: LearningSessionRequest,
    output: SessionOutput,
) -> StoredSessionRecord:
    """Append one orchestrated turn to the store.

    The tutor turn and observations are appended to the session record
    (created on first use) and the learner's state is upserted with the
    new skill graph. Kernel runs and internal notes already on the
    learner's state are kept. Caps are enforced by the store.

    Args:
        store: Target store.
        request: Request the output was produced for.
        output: Orchestrator output.

    Returns:
        Copy of the stored session record.

    Raises:
        StoreValidationError: If the output belongs to another session.
    """
    trace = output.session_trace
    if trace.session_id != request.session_id:
        raise StoreValidationError(
            "Session output does not match the request",
            details={"request": request.session_id, "output": trace.session_id},
        )

    plan = output.tutor_turn
    turn = DialogueTurn(
        turn_number=trace.turn_count,
        tutor_message=plan.message,
        tutor_questions=plan.questions,
        scaffold_step=plan.scaffold_step,
        timestamp=trace.timestamp_iso,
        refused=plan.should_refuse,
    )

    def _append_turn(current: StoredSessionRecord | None) -> StoredSessionRecord:
        record = current if current is not None else StoredSessionRecord(
            session_id=request.session_id,
            learner_id=request.learner.learner_id,
            goal=request.goal,
            created_at_iso=trace.timestamp_iso,
        )
        record.tutor_turns.append(turn)
        record.observations.extend(output.observations)
        record.session_trace = trace
        return record

    def _with_new_graph(previous: StoredLearnerState | None) -> StoredLearnerState:
        return StoredLearnerState(
            learner_profile=request.learner,
            skill_graph=output.skill_graph_delta.new_graph,
            version=trace.contracts_version,
            updated_at_iso=trace.timestamp_iso,
            kernel_runs=previous.kernel_runs if previous else [],
            internal_notes=previous.internal_notes if previous else [],
        )

    stored = store.update_session(request.session_id, request.learner.learner_id, _append_turn)
    store.update_learner_state(request.learner.learner_id, _with_new_graph)
    return stored


def record_kernel_run(
    store: InMemoryLearningStore,
    profile: LearnerProfile,
    run: KernelRunRecord,
) -> StoredLearnerState:
    """Attach a kernel run to a learner's state, creating the state if needed.

    Raises:
        StoreValidationError: If the run belongs to another learner.
    """
    if run.learner_id != profile.learner_id:
        raise StoreValidationError(
            "Kernel run belongs to another learner",
            details={"run_id": run.run_id},
        )

    def _append_run(state: StoredLearnerState | None) -> StoredLearnerState:
        state = state or StoredLearnerState(
            learner_profile=profile,
            skill_graph=create_empty_skill_graph(profile.learner_id),
            version=store.contracts_version,
            updated_at_iso=run.created_at_iso,
        )
        state.kernel_runs.append(run)
        return state

    return store.update_learner_state(profile.learner_id, _append_run)
