# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for tutor turn style enforcement and age-band profiles."""

from collections.abc import Callable
from pathlib import Path

import pytest

from src.core.config.yaml_loader import YAMLLoadError
from src.core.dialogue.constants import ActionType, ScaffoldStep, TutorMode
from src.core.dialogue.models import TurnAction, TurnPlan
from src.core.learner.constants import AgeBand
from src.core.learner.models import LearnerProfile
from src.core.style.enforcer import (
    apply_style_to_tutor_turn,
    parse_style_hint,
    simplify_language,
    trim_to_word_budget,
)
from src.core.style.profiles import (
    DEFAULT_STYLE_PROFILES,
    load_style_profiles,
    style_hint_for_profile,
)

LONG_MESSAGE = " ".join(
    f"Sentence number {i} explains one more detail about adding fractions." for i in range(20)
)


def make_plan(message: str = LONG_MESSAGE) -> TurnPlan:
    """Create a hint turn with three questions."""
    return TurnPlan(
        mode=TutorMode.SOCRATIC,
        message=message,
        questions=(
            "What do you notice?",
            "Why does that work?",
            "Can you demonstrate it?",
        ),
        scaffold_step=ScaffoldStep.OFFER_HINT,
        actions=(TurnAction(type=ActionType.OFFER_HINT),),
        next_suggested_learner_action="Use the hint and try again",
    )


@pytest.mark.unit
class TestParseStyleHint:
    """Tests for hint parsing."""

    def test_known_hints_in_order(self) -> None:
        """Test that hints are normalized, de-duplicated and filtered."""
        assert parse_style_hint(" Short, one_question, SHORT, sparkly ") == [
            "short",
            "one_question",
        ]

    @pytest.mark.parametrize("hint", [None, "", " , "])
    def test_empty(self, hint: str | None) -> None:
        """Test that empty hints parse to nothing."""
        assert parse_style_hint(hint) == []


@pytest.mark.unit
class TestTextHelpers:
    """Tests for vocabulary and length helpers."""

    def test_simplify_language_keeps_case(self) -> None:
        """Test that replacements follow the original capitalization."""
        assert simplify_language("Utilize it to demonstrate the sum.") == "Use it to show the sum."

    def test_simplify_language_whole_words_only(self) -> None:
        """Test that words containing a formal word are left alone."""
        assert simplify_language("utilizes") == "utilizes"

    def test_trim_keeps_whole_sentences(self) -> None:
        """Test that trimming stops at a sentence boundary."""
        text = "One two three. Four five six. Seven eight nine."

        assert trim_to_word_budget(text, 7) == "One two three. Four five six."

    def test_trim_cuts_long_first_sentence(self) -> None:
        """Test that an overlong first sentence is cut with an ellipsis."""
        text = "one two three four five six seven eight"

        assert trim_to_word_budget(text, 3) == "one two three..."

    def test_trim_within_budget(self) -> None:
        """Test that short text is returned unchanged."""
        assert trim_to_word_budget("short text", 10) == "short text"


@pytest.mark.unit
class TestApplyStyleToTutorTurn:
    """Tests for applying a style hint to a plan."""

    @pytest.mark.parametrize("hint", [None, "", "unknown_hint"])
    def test_no_hints_returns_same_plan(self, hint: str | None) -> None:
        """Test identity when there is nothing to apply."""
        plan = make_plan()

        assert apply_style_to_tutor_turn(plan, hint) is plan

    def test_very_short_one_question(self) -> None:
        """Test word budget and question cap."""
        styled = apply_style_to_tutor_turn(make_plan(), "very_short, one_question")

        assert len(styled.message.split()) <= 50
        assert styled.questions == ("What do you notice?",)

    def test_tightest_limits_win(self) -> None:
        """Test that the smallest budget and cap apply."""
        styled = apply_style_to_tutor_turn(
            make_plan(), "medium_length, short, two_questions_max, calm_mode"
        )

        assert len(styled.message.split()) <= 75
        assert len(styled.questions) == 1

    def test_framing_fits_budget(self) -> None:
        """Test that prefixes and suffixes count against the budget."""
        styled = apply_style_to_tutor_turn(
            make_plan(), "very_short, playful_tone, examples_first, critique_friendly"
        )

        assert styled.message.startswith("Let's explore! Let's look at an example first.")
        assert styled.message.endswith("Push back on anything that doesn't convince you.")
        assert len(styled.message.split()) <= 50

    def test_full_length_keeps_message(self) -> None:
        """Test that full_length does not trim."""
        styled = apply_style_to_tutor_turn(make_plan(), "full_length, flexible_scaffolding")

        assert styled.message == LONG_MESSAGE
        assert len(styled.questions) == 3

    def test_simple_language_applies_to_questions(self) -> None:
        """Test that questions are simplified too."""
        styled = apply_style_to_tutor_turn(make_plan("Utilize the hint."), "simple_language")

        assert styled.message == "Use the hint."
        assert styled.questions[-1] == "Can you show it?"

    def test_structure_passes_through(self) -> None:
        """Test that only message and questions change."""
        plan = make_plan()

        styled = apply_style_to_tutor_turn(plan, "short, encouraging_tone")

        assert styled is not plan
        assert styled.scaffold_step == plan.scaffold_step
        assert styled.actions == plan.actions
        assert styled.should_refuse == plan.should_refuse
        assert styled.next_suggested_learner_action == plan.next_suggested_learner_action
        assert plan.message == LONG_MESSAGE

    def test_deterministic(self) -> None:
        """Test that styling the same plan twice gives equal results."""
        hint = "short, one_question, examples_first, encouraging_tone"

        assert apply_style_to_tutor_turn(make_plan(), hint) == apply_style_to_tutor_turn(
            make_plan(), hint
        )


@pytest.mark.unit
class TestStyleProfiles:
    """Tests for age-band style profiles."""

    def test_every_band_has_a_profile(self) -> None:
        """Test that defaults cover every age band."""
        assert set(DEFAULT_STYLE_PROFILES) == set(AgeBand)

    def test_hint_for_young_learner(self, young_profile: LearnerProfile) -> None:
        """Test the 6-9 profile."""
        hint = style_hint_for_profile(young_profile)

        assert parse_style_hint(hint) == [
            "very_short",
            "one_question",
            "examples_first",
            "playful_tone",
        ]

    def test_calm_mode_is_prepended(self, adult_profile: LearnerProfile) -> None:
        """Test that calm mode leads the hint."""
        assert style_hint_for_profile(adult_profile, calm_mode=True).startswith("calm_mode, ")
        assert style_hint_for_profile(adult_profile, calm_mode=True, profiles={}) == "calm_mode"

    def test_load_without_path_returns_defaults(self) -> None:
        """Test that no override file means the built-in table."""
        profiles = load_style_profiles()

        assert profiles == DEFAULT_STYLE_PROFILES
        assert profiles is not DEFAULT_STYLE_PROFILES

    def test_yaml_overrides(
        self, tmp_path: Path, make_profile: Callable[..., LearnerProfile]
    ) -> None:
        """Test that a YAML file overrides single bands."""
        path = tmp_path / "style_profiles.yaml"
        path.write_text('profiles:\n  teen: "short, one_question"\n')

        profiles = load_style_profiles(path)

        assert profiles[AgeBand.TEEN] == "short, one_question"
        assert profiles[AgeBand.ADULT] == DEFAULT_STYLE_PROFILES[AgeBand.ADULT]
        teen = make_profile(AgeBand.TEEN, minor=True)
        assert style_hint_for_profile(teen, profiles=profiles) == "short, one_question"

    def test_yaml_unknown_band(self, tmp_path: Path) -> None:
        """Test that an unknown age band is rejected."""
        path = tmp_path / "style_profiles.yaml"
        path.write_text("profiles:\n  toddler: very_short\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_style_profiles(path)

        assert "Unknown age band 'toddler'" in str(exc_info.value)
