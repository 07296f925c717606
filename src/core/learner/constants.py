# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Constants for the learner and skill model.

This module defines the closed vocabularies used by the learner model:
age bands, observation types, process-level cognitive skills and
confidence bands, plus the thresholds the skill updater applies.

The skill vocabulary describes observable reasoning processes only.
There is deliberately no enum or field for traits, conditions, or
any ordering of learners against each other.
"""

import re
from enum import Enum


class AgeBand(str, Enum):
    """Age band of a learner, supplied by the caller."""

    SIX_TO_NINE = "6-9"
    TEN_TO_TWELVE = "10-12"
    TEEN = "teen"
    ADULT = "adult"


class ObservationType(str, Enum):
    """Kinds of learning-process observations derived from an utterance."""

    STATED_UNCERTAINTY = "StatedUncertainty"  # Hedged or unsure language
    PROVIDED_EVIDENCE = "ProvidedEvidence"  # Gave a reason or example
    CORRECTED_SELF = "CorrectedSelf"  # Revised an earlier statement
    ASKED_CLARIFYING_QUESTION = "AskedClarifyingQuestion"


class CognitiveSkillId(str, Enum):
    """Closed set of process-level cognitive skills."""

    UNCERTAINTY_HANDLING = "UncertaintyHandling"
    EVIDENCE_USE = "EvidenceUse"
    ERROR_CORRECTION = "ErrorCorrection"
    QUESTION_FORMULATION = "QuestionFormulation"


class ConfidenceBand(str, Enum):
    """How much evidence exists for a skill observation.

    Not a measure of ability. Ordered Low < Medium < High.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def order(self) -> int:
        """Position of the band in the Low < Medium < High ordering."""
        return _BAND_ORDER[self]


_BAND_ORDER = {
    ConfidenceBand.LOW: 0,
    ConfidenceBand.MEDIUM: 1,
    ConfidenceBand.HIGH: 2,
}


# Default observation -> skill routing when no skill hint is given
OBSERVATION_SKILL_MAP: dict[ObservationType, CognitiveSkillId] = {
    ObservationType.STATED_UNCERTAINTY: CognitiveSkillId.UNCERTAINTY_HANDLING,
    ObservationType.PROVIDED_EVIDENCE: CognitiveSkillId.EVIDENCE_USE,
    ObservationType.CORRECTED_SELF: CognitiveSkillId.ERROR_CORRECTION,
    ObservationType.ASKED_CLARIFYING_QUESTION: CognitiveSkillId.QUESTION_FORMULATION,
}


# =============================================================================
# Thresholds
# =============================================================================

class SkillThresholds:
    """Thresholds for skill graph updates."""

    # Ring buffer capacity for recent signal strengths
    MAX_RECENT_SIGNALS = 20

    # Confidence band promotion
    MEDIUM_MIN_EXPOSURES = 3
    MEDIUM_MIN_MEAN_SIGNAL = 0.5
    HIGH_MIN_EXPOSURES = 10
    HIGH_MIN_MEAN_SIGNAL = 0.7

    # Admission filter for young minors: signal kept only above this strength
    YOUNG_LEARNER_MIN_STRENGTH = 0.5


# Bands whose minors get the signal admission filter
FILTERED_AGE_BANDS = frozenset({AgeBand.SIX_TO_NINE})


# =============================================================================
# Prohibited vocabulary
# =============================================================================

# Labels that must never appear in skill states, audit entries or outputs
PROHIBITED_VOCABULARY: tuple[str, ...] = (
    # Trait and personality labels
    "smart",
    "dumb",
    "gifted",
    "struggling",
    "lazy",
    "bad student",
    "unmotivated",
    "careless",
    "inattentive",
    # Diagnostic labels
    "adhd",
    "autism",
    "dyslexia",
    "dyscalculia",
    "learning disability",
    "disorder",
    "deficit",
    "impairment",
    # Ranking and grading labels
    "score",
    "grade",
    "rank",
    "percentile",
    "iq",
)

_PROHIBITED_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in PROHIBITED_VOCABULARY) + ")",
    re.IGNORECASE,
)


def find_prohibited_terms(text: str) -> list[str]:
    """Return the prohibited labels found in ``text`` (word-prefix match).

    Matching is case-insensitive and anchored at the start of a word, so
    ``"grades"`` matches ``"grade"`` but ``"upgrade"`` and ``"critique"``
    do not.

    Args:
        text: Any serialized output.

    Returns:
        Sorted, de-duplicated list of matched labels.
    """
    return sorted({match.group(0).lower() for match in _PROHIBITED_PATTERN.finditer(text)})
