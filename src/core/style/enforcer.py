# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor turn style enforcement.

Applies a comma-separated style hint to a TurnPlan: caps the number of
questions, trims the message to a word budget, simplifies vocabulary and
adds short framing for tone. Only the message and questions change; the
scaffold step, actions and refusal fields pass through untouched.

Supported hints:
    calm_mode, one_question, two_questions_max,
    very_short, short, medium_length, full_length,
    examples_first, playful_tone, encouraging_tone,
    simple_language, critique_friendly, flexible_scaffolding

Example:
    >>> styled = apply_style_to_tutor_turn(plan, "short, one_question")
    >>> len(styled.questions)
    1
"""

import logging
import re
from dataclasses import replace

from src.core.dialogue.models import TurnPlan

logger = logging.getLogger(__name__)


class StyleLimits:
    """Word budgets and question caps per hint."""

    WORD_BUDGETS: dict[str, int | None] = {
        "very_short": 50,
        "short": 75,
        "medium_length": 120,
        "full_length": None,
    }
    QUESTION_CAPS: dict[str, int] = {
        "calm_mode": 1,
        "one_question": 1,
        "two_questions_max": 2,
    }
    # Floor for the trimmed body once framing is accounted for
    MIN_BODY_WORDS = 12


KNOWN_HINTS = frozenset(
    {
        *StyleLimits.WORD_BUDGETS,
        *StyleLimits.QUESTION_CAPS,
        "examples_first",
        "playful_tone",
        "encouraging_tone",
        "simple_language",
        "critique_friendly",
        "flexible_scaffolding",
    }
)

# Leading framing, applied in this order
PREFIXES: tuple[tuple[str, str], ...] = (
    ("playful_tone", "Let's explore!"),
    ("encouraging_tone", "Nice effort so far."),
    ("examples_first", "Let's look at an example first."),
)

# Trailing framing, applied in this order
SUFFIXES: tuple[tuple[str, str], ...] = (
    ("critique_friendly", "Push back on anything that doesn't convince you."),
    ("calm_mode", "It's fine to say you're not sure, and we can pause for a break any time."),
)

SIMPLE_WORDS: dict[str, str] = {
    "utilize": "use",
    "utilise": "use",
    "demonstrate": "show",
    "comprehend": "understand",
    "analyze": "look at",
    "analyse": "look at",
    "synthesize": "combine",
    "approximately": "about",
    "subsequently": "then",
    "facilitate": "help",
    "additional": "more",
    "sufficient": "enough",
    "consequently": "so",
    "commence": "start",
}

_SIMPLE_WORD_PATTERN = re.compile(
    r"\b(" + "|".join(SIMPLE_WORDS) + r")\b",
    re.IGNORECASE,
)
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def parse_style_hint(style_hint: str | None) -> list[str]:
    """Split a style hint into known hint names, preserving order.

    Unknown hints are ignored.
    """
    if not style_hint:
        return []
    hints: list[str] = []
    for raw in style_hint.split(","):
        hint = raw.strip().lower()
        if not hint or hint in hints:
            continue
        if hint not in KNOWN_HINTS:
            logger.debug("Ignoring unknown style hint %r", hint)
            continue
        hints.append(hint)
    return hints


def simplify_language(text: str) -> str:
    """Replace formal vocabulary with plainer words."""

    def _swap(match: re.Match[str]) -> str:
        word = match.group(0)
        simple = SIMPLE_WORDS[word.lower()]
        return simple[0].upper() + simple[1:] if word[0].isupper() else simple

    return _SIMPLE_WORD_PATTERN.sub(_swap, text)


def trim_to_word_budget(text: str, budget: int) -> str:
    """Trim text to at most ``budget`` words.

    Whole sentences are kept while they fit; if even the first sentence is
    too long it is cut at the budget and closed with an ellipsis.
    """
    if len(text.split()) <= budget:
        return text

    kept: list[str] = []
    used = 0
    for sentence in _SENTENCE_END.split(text.strip()):
        words = len(sentence.split())
        if used + words > budget:
            break
        kept.append(sentence)
        used += words

    if kept:
        return " ".join(kept)
    return " ".join(text.split()[: max(budget, 1)]).rstrip(",;:") + "..."


def _word_budget(hints: list[str]) -> int | None:
    budgets = [
        StyleLimits.WORD_BUDGETS[h]
        for h in hints
        if StyleLimits.WORD_BUDGETS.get(h) is not None
    ]
    return min(budgets) if budgets else None


def _question_cap(hints: list[str]) -> int | None:
    caps = [StyleLimits.QUESTION_CAPS[h] for h in hints if h in StyleLimits.QUESTION_CAPS]
    return min(caps) if caps else None


def apply_style_to_tutor_turn(plan: TurnPlan, style_hint: str | None) -> TurnPlan:
    """Apply a style hint to a tutor turn plan.

    Args:
        plan: Plan produced by the turn planner.
        style_hint: Comma-separated hint names; empty or None for no styling.

    Returns:
        Styled copy of the plan, or the plan itself when there is nothing
        to apply.
    """
    hints = parse_style_hint(style_hint)
    if not hints:
        return plan

    message = plan.message
    if "simple_language" in hints:
        message = simplify_language(message)

    prefix = " ".join(text for hint, text in PREFIXES if hint in hints)
    suffix = " ".join(text for hint, text in SUFFIXES if hint in hints)

    budget = _word_budget(hints)
    if budget is not None:
        framing_words = len(prefix.split()) + len(suffix.split())
        message = trim_to_word_budget(
            message, max(budget - framing_words, StyleLimits.MIN_BODY_WORDS)
        )

    message = " ".join(part for part in (prefix, message, suffix) if part)

    questions = plan.questions
    if "simple_language" in hints:
        questions = tuple(simplify_language(q) for q in questions)
    cap = _question_cap(hints)
    if cap is not None:
        questions = questions[:cap]

    return replace(plan, message=message, questions=questions)
