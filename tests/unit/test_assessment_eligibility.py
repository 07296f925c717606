# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for assessment eligibility and descriptors."""

from collections.abc import Callable

import pytest

from src.core.assessment import (
    YOUNG_LEARNER_ASSESSMENTS,
    AssessmentGenerator,
    AssessmentType,
    DescriptorAssessmentGenerator,
    check_assessment_eligibility,
)
from src.core.dialogue.constants import RefusalReason
from src.core.dialogue.models import ContextFlags
from src.core.learner.constants import AgeBand
from src.core.learner.models import LearnerProfile

TEACHER = ContextFlags(is_teacher_present=True)
HIGH_STAKES = ContextFlags(is_high_stakes_assessment=True)


@pytest.mark.unit
class TestCheckAssessmentEligibility:
    """Tests for check_assessment_eligibility."""

    @pytest.mark.parametrize("assessment_type", list(AssessmentType))
    def test_adult_always_eligible(
        self, adult_profile: LearnerProfile, assessment_type: AssessmentType
    ) -> None:
        """Test that adults may take any format, even in high-stakes settings."""
        assert check_assessment_eligibility(adult_profile, assessment_type) is None
        assert check_assessment_eligibility(adult_profile, assessment_type, HIGH_STAKES) is None

    @pytest.mark.parametrize("assessment_type", list(AssessmentType))
    def test_young_learner_formats(
        self, young_profile: LearnerProfile, assessment_type: AssessmentType
    ) -> None:
        """Test that only low-pressure formats are open to 6-9 learners alone."""
        result = check_assessment_eligibility(young_profile, assessment_type)

        if assessment_type in YOUNG_LEARNER_ASSESSMENTS:
            assert result is None
        else:
            assert result == RefusalReason.AGE_BAND_RESTRICTION

    def test_teacher_unlocks_young_learner_formats(self, young_profile: LearnerProfile) -> None:
        """Test that a present teacher lifts the format restriction."""
        assert (
            check_assessment_eligibility(young_profile, AssessmentType.ORAL_REASONING, TEACHER)
            is None
        )

    def test_high_stakes_minor_refused(self, teen_profile: LearnerProfile) -> None:
        """Test that minors in a high-stakes setting are refused."""
        assert (
            check_assessment_eligibility(teen_profile, AssessmentType.ACTIVE_RECALL, HIGH_STAKES)
            == RefusalReason.HIGH_STAKES_CHEATING_ATTEMPT
        )

    def test_high_stakes_checked_first(self, young_profile: LearnerProfile) -> None:
        """Test that the high-stakes rule wins over the age-band rule."""
        assert (
            check_assessment_eligibility(young_profile, AssessmentType.ORAL_REASONING, HIGH_STAKES)
            == RefusalReason.HIGH_STAKES_CHEATING_ATTEMPT
        )

    def test_high_stakes_with_teacher_allowed(self, teen_profile: LearnerProfile) -> None:
        """Test that a present teacher lifts the high-stakes rule."""
        flags = ContextFlags(is_high_stakes_assessment=True, is_teacher_present=True)

        assert check_assessment_eligibility(teen_profile, AssessmentType.TEACH_BACK, flags) is None

    def test_young_non_minor_unrestricted(
        self, make_profile: Callable[..., LearnerProfile]
    ) -> None:
        """Test that the age-band rule needs the minor flag."""
        profile = make_profile(AgeBand.SIX_TO_NINE, minor=False)

        assert check_assessment_eligibility(profile, AssessmentType.CRITIQUE_AI_ANSWER) is None


@pytest.mark.unit
class TestDescriptorAssessmentGenerator:
    """Tests for the default generator."""

    def test_generates_descriptor(self, adult_profile: LearnerProfile) -> None:
        """Test that the descriptor records what was issued."""
        generator = DescriptorAssessmentGenerator()

        descriptor = generator.generate(
            AssessmentType.TEACH_BACK,
            session_id="session-1",
            learner=adult_profile,
            topic="fractions",
            objective="add fractions",
        )

        assert isinstance(generator, AssessmentGenerator)
        assert descriptor.to_dict() == {
            "type": "TeachBack",
            "session_id": "session-1",
            "learner_id": "adult-1",
            "topic": "fractions",
            "objective": "add fractions",
            "contracts_version": "0.1",
        }

    def test_generator_is_abstract(self) -> None:
        """Test that the base class cannot be instantiated."""
        with pytest.raises(TypeError):
            AssessmentGenerator()  # type: ignore[abstract]
