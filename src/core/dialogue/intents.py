# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lexical classification of learner utterances.

Classifies a learner utterance into the intents the planner routes on
(solution request, attempt, clarifying question) and derives learning
process observations from simple keyword markers. Matching is
case-insensitive whole-phrase matching over fixed marker lists, so the
same utterance always yields the same classification.
"""

import re
from dataclasses import dataclass

from src.core.dialogue.constants import DialogueLimits
from src.core.learner.constants import OBSERVATION_SKILL_MAP, ObservationType
from src.core.learner.models import LearningSessionObservation

# Phrases asking the tutor to hand over the answer
SOLUTION_REQUEST_MARKERS = (
    "tell me",
    "give me the answer",
    "give me the solution",
    "what's the answer",
    "what is the answer",
    "show me the answer",
    "show me the solution",
    "just the answer",
    "just the solution",
)

# Phrases showing the learner is reasoning through their own attempt
ATTEMPT_MARKERS = (
    "because",
    "i think",
    "my answer",
    "my guess",
    "i tried",
    "i've tried",
    "i got",
    "i'd say",
    "the reason",
    "so it",
    "which means",
)

QUESTION_OPENERS = (
    "what",
    "why",
    "how",
    "which",
    "when",
    "where",
    "who",
    "can you",
    "could you",
    "is it",
    "does",
    "do i",
    "should i",
)

CLARIFICATION_MARKERS = (
    "clarify",
    "what do you mean",
    "explain",
    "does that mean",
)

HEDGING_MARKERS = (
    "not sure",
    "unsure",
    "uncertain",
    "maybe",
    "i guess",
    "probably",
    "perhaps",
    "i don't know",
    "i dont know",
    "confused",
    "might be",
    "no idea",
)

EVIDENCE_MARKERS = (
    "because",
    "since",
    "for example",
    "for instance",
    "the reason",
    "therefore",
    "which means",
    "that's why",
    "evidence",
    "so that",
)

SELF_CORRECTION_MARKERS = (
    "actually",
    "wait",
    "i mean",
    "i was wrong",
    "let me fix",
    "correction",
    "oops",
    "scratch that",
    "on second thought",
)

MIN_ATTEMPT_LENGTH = 20


@dataclass(frozen=True)
class UtteranceIntent:
    """Classification of one learner utterance.

    Attributes:
        text: Normalized (stripped, lowercased) utterance.
        requests_solution: Learner asked to be told the answer.
        is_attempt: Learner offered their own reasoning.
        is_question: Learner asked a question.
        hedge_count: Number of hedging markers found.
        evidence_count: Number of evidence markers found.
        correction_count: Number of self-correction markers found.
        clarification_count: Number of clarification markers found.
    """

    text: str
    requests_solution: bool = False
    is_attempt: bool = False
    is_question: bool = False
    hedge_count: int = 0
    evidence_count: int = 0
    correction_count: int = 0
    clarification_count: int = 0

    @property
    def is_empty(self) -> bool:
        """Check if there was nothing to classify."""
        return not self.text

    @property
    def expresses_uncertainty(self) -> bool:
        """Check if the learner hedged."""
        return self.hedge_count > 0


def _compile_markers(markers: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(rf"\b{re.escape(marker)}\b") for marker in markers)


_SOLUTION_REQUEST_PATTERNS = _compile_markers(SOLUTION_REQUEST_MARKERS)
_ATTEMPT_PATTERNS = _compile_markers(ATTEMPT_MARKERS)
_CLARIFICATION_PATTERNS = _compile_markers(CLARIFICATION_MARKERS)
_HEDGING_PATTERNS = _compile_markers(HEDGING_MARKERS)
_EVIDENCE_PATTERNS = _compile_markers(EVIDENCE_MARKERS)
_SELF_CORRECTION_PATTERNS = _compile_markers(SELF_CORRECTION_MARKERS)
_QUESTION_OPENER_PATTERN = re.compile(
    r"(?:" + "|".join(re.escape(opener) for opener in QUESTION_OPENERS) + r")\b"
)


def _count_markers(text: str, patterns: tuple[re.Pattern[str], ...]) -> int:
    return sum(1 for pattern in patterns if pattern.search(text))


def classify_utterance(utterance: str | None) -> UtteranceIntent:
    """Classify a learner utterance.

    Args:
        utterance: Raw learner text, or None when the learner said nothing.

    Returns:
        UtteranceIntent with routing flags and marker counts.
    """
    text = (utterance or "").strip().lower()
    if not text:
        return UtteranceIntent(text="")

    requests_solution = _count_markers(text, _SOLUTION_REQUEST_PATTERNS) > 0
    is_attempt = (
        len(text) > MIN_ATTEMPT_LENGTH
        and not requests_solution
        and _count_markers(text, _ATTEMPT_PATTERNS) > 0
    )
    is_question = "?" in text or _QUESTION_OPENER_PATTERN.match(text) is not None

    return UtteranceIntent(
        text=text,
        requests_solution=requests_solution,
        is_attempt=is_attempt,
        is_question=is_question,
        hedge_count=_count_markers(text, _HEDGING_PATTERNS),
        evidence_count=_count_markers(text, _EVIDENCE_PATTERNS),
        correction_count=_count_markers(text, _SELF_CORRECTION_PATTERNS),
        clarification_count=_count_markers(text, _CLARIFICATION_PATTERNS),
    )


def _strength(base: float, step: float, count: int, ceiling: float) -> float:
    return round(min(ceiling, base + step * (count - 1)), 2)


def extract_observations(
    intent: UtteranceIntent,
    session_id: str,
    timestamp: str,
) -> list[LearningSessionObservation]:
    """Derive learning process observations from a classified utterance.

    Observations come out in a fixed type order. Each carries the skill
    its type maps to as skill hint.

    Args:
        intent: Classified utterance.
        session_id: Session the observations belong to.
        timestamp: ISO timestamp to stamp on every observation.

    Returns:
        Zero or more observations.
    """
    if intent.is_empty:
        return []

    strengths: dict[ObservationType, float] = {}
    if intent.hedge_count:
        strengths[ObservationType.STATED_UNCERTAINTY] = _strength(
            0.6, 0.2, intent.hedge_count, 1.0
        )
    if intent.evidence_count:
        strengths[ObservationType.PROVIDED_EVIDENCE] = _strength(
            0.55, 0.15, intent.evidence_count, 0.95
        )
    if intent.correction_count:
        strengths[ObservationType.CORRECTED_SELF] = _strength(
            0.6, 0.15, intent.correction_count, 0.9
        )
    if intent.is_question and not intent.requests_solution:
        strengths[ObservationType.ASKED_CLARIFYING_QUESTION] = _strength(
            0.6, 0.1, 1 + intent.clarification_count, 0.9
        )

    return [
        LearningSessionObservation(
            type=observation_type,
            timestamp=timestamp,
            strength=strengths[observation_type],
            session_id=session_id,
            skill_hint=OBSERVATION_SKILL_MAP[observation_type].value,
        )
        for observation_type in ObservationType
        if observation_type in strengths
    ]


def uncertainty_note(utterance: str) -> str:
    """Build the note recorded when the learner hedges."""
    text = " ".join(utterance.split())
    if len(text) > DialogueLimits.MAX_UNCERTAINTY_NOTE_CHARS:
        text = text[: DialogueLimits.MAX_UNCERTAINTY_NOTE_CHARS - 3].rstrip() + "..."
    return f"Unsure about: {text}"
