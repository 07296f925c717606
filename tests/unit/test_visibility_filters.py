# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for role-scoped visibility filters.

Covers:
- Default-deny for adults and teacher opt-in
- Default-allow for minors
- Sanitization of traces, kernel runs and internal notes
- Repeatable serialization of views
"""

import json
from collections.abc import Callable

import pytest

from src.core.dialogue.constants import ScaffoldStep
from src.core.dialogue.models import DialogueTurn
from src.core.learner.models import LearnerProfile, create_empty_skill_graph
from src.core.session.models import LearningGoal, SessionTrace
from src.core.store.models import (
    KernelDecision,
    KernelRunRecord,
    KernelTraceNode,
    StoredLearnerState,
    StoredSessionRecord,
)
from src.core.store.visibility import (
    ACCESS_DENIED_NOTE,
    ViewerRole,
    can_view,
    filter_learner_state_for_viewer,
    filter_session_for_viewer,
    get_visibility_policy,
    is_internal,
    sanitize_codes,
    sanitize_kernel_run,
)

TIMESTAMP = "2025-03-14T09:30:00+00:00"


@pytest.fixture
def make_session_record() -> Callable[[LearnerProfile], StoredSessionRecord]:
    """Provide a factory for a session record with internal details."""

    def _make(profile: LearnerProfile) -> StoredSessionRecord:
        return StoredSessionRecord(
            session_id="session-1",
            learner_id=profile.learner_id,
            goal=LearningGoal(subject="mathematics", topic="fractions", objective="add fractions"),
            created_at_iso=TIMESTAMP,
            tutor_turns=[
                DialogueTurn(
                    turn_number=1,
                    tutor_message="What do you already know about fractions?",
                    tutor_questions=("Where have you seen fractions before?",),
                    scaffold_step=ScaffoldStep.ELICIT_PRIOR_KNOWLEDGE,
                    timestamp=TIMESTAMP,
                )
            ],
            session_trace=SessionTrace(
                session_id="session-1",
                learner_id=profile.learner_id,
                timestamp_iso=TIMESTAMP,
                inputs_hash="0" * 64,
                contracts_version="0.1",
                turn_count=1,
                refusals=("AgeBandRestriction", "internal_rate_limit"),
                notes=(
                    "Scaffold step: ElicitPriorKnowledge",
                    "DEBUG: planner took 3ms",
                    "System prompt v2",
                ),
            ),
            internal_notes=["reviewed by operator"],
        )

    return _make


def make_learner_state(profile: LearnerProfile) -> StoredLearnerState:
    """Create a learner state with one kernel run carrying internal nodes."""
    run = KernelRunRecord(
        run_id="run-1",
        kernel_id="next-activity",
        adapter_id="learning",
        learner_id=profile.learner_id,
        created_at_iso=TIMESTAMP,
        input_hash="abc123",
        decision=KernelDecision(
            outcome_id="practice",
            label="Practice",
            confidence="Medium",
            rationale="More practice on adding fractions",
        ),
        trace=(
            KernelTraceNode(
                id="n1",
                type="input",
                label="Learner goal",
                description="Add fractions",
                timestamp=TIMESTAMP,
            ),
            KernelTraceNode(
                id="n2",
                type="step",
                label="Internal weighting",
                description="Adapter weights",
                timestamp=TIMESTAMP,
            ),
            KernelTraceNode(
                id="n3",
                type="step",
                label="Rule check",
                description="debug: rule 4 fired",
                timestamp=TIMESTAMP,
            ),
        ),
    )
    return StoredLearnerState(
        learner_profile=profile,
        skill_graph=create_empty_skill_graph(profile.learner_id),
        kernel_runs=[run],
        internal_notes=["flagged for review"],
    )


# ============================================================================
# Policy
# ============================================================================


@pytest.mark.unit
class TestVisibilityPolicy:
    """Tests for policy derivation and role checks."""

    def test_adult_defaults_private(self, adult_profile: LearnerProfile) -> None:
        """Test that only the learner may view an adult's records."""
        policy = get_visibility_policy(adult_profile)

        assert can_view(ViewerRole.LEARNER, policy)
        assert not can_view(ViewerRole.PARENT, policy)
        assert not can_view(ViewerRole.TEACHER, policy)

    def test_adult_teacher_opt_in(self, adult_profile: LearnerProfile) -> None:
        """Test that opting in opens access to teachers only."""
        policy = get_visibility_policy(adult_profile, teacher_opt_in=True)

        assert can_view(ViewerRole.TEACHER, policy)
        assert not can_view(ViewerRole.PARENT, policy)

    def test_minor_defaults_open(self, teen_profile: LearnerProfile) -> None:
        """Test that parents and teachers may view a minor's records."""
        policy = get_visibility_policy(teen_profile)

        assert policy.is_minor
        assert can_view("Parent", policy)
        assert can_view("Teacher", policy)

    def test_unknown_role_rejected(self, adult_profile: LearnerProfile) -> None:
        """Test that an unknown role string raises."""
        with pytest.raises(ValueError):
            can_view("Principal", get_visibility_policy(adult_profile))


# ============================================================================
# Session views
# ============================================================================


@pytest.mark.unit
class TestFilterSessionForViewer:
    """Tests for session views."""

    def test_teacher_denied_for_private_adult(
        self,
        adult_profile: LearnerProfile,
        make_session_record: Callable[[LearnerProfile], StoredSessionRecord],
    ) -> None:
        """Test the adult default-deny view."""
        record = make_session_record(adult_profile)

        view = filter_session_for_viewer(record, "Teacher", get_visibility_policy(adult_profile))

        assert view.is_denied
        assert view.visibility_note == ACCESS_DENIED_NOTE
        assert view.tutor_turns == ()
        assert view.observations == ()
        assert view.session_trace is None
        assert view.goal is None
        assert view.session_id == "session-1"

    def test_teacher_allowed_after_opt_in(
        self,
        adult_profile: LearnerProfile,
        make_session_record: Callable[[LearnerProfile], StoredSessionRecord],
    ) -> None:
        """Test that opting in returns the full record."""
        record = make_session_record(adult_profile)
        policy = get_visibility_policy(adult_profile, teacher_opt_in=True)

        view = filter_session_for_viewer(record, ViewerRole.TEACHER, policy)

        assert not view.is_denied
        assert view.visibility_note is None
        assert view.tutor_turns == tuple(record.tutor_turns)
        assert view.goal == record.goal

    @pytest.mark.parametrize("role", ["Parent", "Teacher", "Learner"])
    def test_minor_records_visible(
        self,
        role: str,
        young_profile: LearnerProfile,
        make_session_record: Callable[[LearnerProfile], StoredSessionRecord],
    ) -> None:
        """Test that every role sees a minor's sanitized record."""
        record = make_session_record(young_profile)

        view = filter_session_for_viewer(record, role, get_visibility_policy(young_profile))

        assert view.visibility_note is None
        assert len(view.tutor_turns) == 1

    def test_trace_is_sanitized(
        self,
        adult_profile: LearnerProfile,
        make_session_record: Callable[[LearnerProfile], StoredSessionRecord],
    ) -> None:
        """Test that internal codes and notes are stripped for every viewer."""
        record = make_session_record(adult_profile)

        view = filter_session_for_viewer(record, "Learner", get_visibility_policy(adult_profile))

        assert view.session_trace is not None
        assert view.session_trace.refusals == ("AgeBandRestriction",)
        assert view.session_trace.notes == ("Scaffold step: ElicitPriorKnowledge",)
        assert "internal_notes" not in view.to_dict()
        assert record.session_trace is not None
        assert len(record.session_trace.notes) == 3


# ============================================================================
# Learner state views
# ============================================================================


@pytest.mark.unit
class TestFilterLearnerStateForViewer:
    """Tests for learner state views."""

    def test_parent_denied_for_adult(self, adult_profile: LearnerProfile) -> None:
        """Test that a denied view carries nothing but the note."""
        view = filter_learner_state_for_viewer(
            make_learner_state(adult_profile), "Parent", get_visibility_policy(adult_profile)
        )

        assert view.is_denied
        assert view.learner_profile is None
        assert view.skill_graph is None
        assert view.kernel_runs is None
        assert view.learner_id == "adult-1"

    def test_kernel_trace_sanitized(self, teen_profile: LearnerProfile) -> None:
        """Test that internal kernel trace nodes are removed."""
        state = make_learner_state(teen_profile)

        view = filter_learner_state_for_viewer(
            state, "Parent", get_visibility_policy(teen_profile)
        )

        assert view.kernel_runs is not None
        assert [node.id for node in view.kernel_runs[0].trace] == ["n1"]
        assert view.kernel_runs[0].decision == state.kernel_runs[0].decision
        assert "internal_notes" not in view.to_dict()
        assert len(state.kernel_runs[0].trace) == 3

    def test_skill_graph_is_copied(self, teen_profile: LearnerProfile) -> None:
        """Test that the view does not share the stored graph."""
        state = make_learner_state(teen_profile)

        view = filter_learner_state_for_viewer(
            state, "Teacher", get_visibility_policy(teen_profile)
        )

        assert view.skill_graph is not None
        assert view.skill_graph is not state.skill_graph
        assert view.skill_graph.to_dict() == state.skill_graph.to_dict()


@pytest.mark.unit
class TestSanitizers:
    """Tests for the sanitizing helpers."""

    def test_is_internal(self) -> None:
        """Test marker detection."""
        assert is_internal("Internal state")
        assert is_internal("system prompt")
        assert is_internal("DEBUG output")
        assert not is_internal("Scaffold step: OfferHint")

    def test_public_codes_always_kept(self) -> None:
        """Test that public reason codes survive sanitizing."""
        codes = ("HighStakesCheatingAttempt", "debug_only", "ContractVersionMismatch")

        assert sanitize_codes(codes) == ("HighStakesCheatingAttempt", "ContractVersionMismatch")

    def test_sanitize_kernel_run_without_trace(self, adult_profile: LearnerProfile) -> None:
        """Test that a run without a trace passes through."""
        run = make_learner_state(adult_profile).kernel_runs[0]
        bare = KernelRunRecord(
            run_id=run.run_id,
            kernel_id=run.kernel_id,
            adapter_id=run.adapter_id,
            learner_id=run.learner_id,
            created_at_iso=run.created_at_iso,
            input_hash=run.input_hash,
            decision=run.decision,
        )

        assert sanitize_kernel_run(bare) == bare


# ============================================================================
# Determinism
# ============================================================================


@pytest.mark.unit
class TestFilterDeterminism:
    """Tests that equal inputs give identical views."""

    @pytest.mark.parametrize("role", list(ViewerRole))
    @pytest.mark.parametrize("profile_name", ["adult_profile", "teen_profile", "young_profile"])
    def test_session_view_is_repeatable(
        self,
        role: ViewerRole,
        profile_name: str,
        request: pytest.FixtureRequest,
        make_session_record: Callable[[LearnerProfile], StoredSessionRecord],
    ) -> None:
        """Test that filtering a session twice serializes to the same bytes."""
        profile: LearnerProfile = request.getfixturevalue(profile_name)
        record = make_session_record(profile)
        policy = get_visibility_policy(profile)

        first = json.dumps(filter_session_for_viewer(record, role, policy).to_dict())
        second = json.dumps(filter_session_for_viewer(record, role, policy).to_dict())

        assert first.encode() == second.encode()

    @pytest.mark.parametrize("role", list(ViewerRole))
    @pytest.mark.parametrize("profile_name", ["adult_profile", "teen_profile", "young_profile"])
    def test_learner_state_view_is_repeatable(
        self,
        role: ViewerRole,
        profile_name: str,
        request: pytest.FixtureRequest,
    ) -> None:
        """Test that filtering a learner state twice serializes to the same bytes."""
        profile: LearnerProfile = request.getfixturevalue(profile_name)
        state = make_learner_state(profile)
        policy = get_visibility_policy(profile, teacher_opt_in=True)

        first = json.dumps(filter_learner_state_for_viewer(state, role, policy).to_dict())
        second = json.dumps(filter_learner_state_for_viewer(state, role, policy).to_dict())

        assert first.encode() == second.encode()
