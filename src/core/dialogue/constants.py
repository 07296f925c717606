# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Constants for the Dialogue Turn Planner.

Defines tutor modes, scaffold steps, refusal reasons and turn action
types, plus the bounds applied to dialogue state.
"""

from enum import Enum


class TutorMode(str, Enum):
    """How the tutor conducts the session."""

    SOCRATIC = "Socratic"  # Guided questioning, default
    EXAMINER = "Examiner"  # Checks understanding, gated for young learners
    COACH = "Coach"  # Lighter-touch prompting around a learner's own plan


class ScaffoldStep(str, Enum):
    """Rungs of the Socratic scaffold ladder, in ladder order."""

    CLARIFY_GOAL = "ClarifyGoal"
    ELICIT_PRIOR_KNOWLEDGE = "ElicitPriorKnowledge"
    ASK_FOR_ATTEMPT = "AskForAttempt"
    ASK_FOR_REASONING = "AskForReasoning"
    OFFER_HINT = "OfferHint"
    OFFER_COUNTEREXAMPLE_OR_TEST = "OfferCounterexampleOrTest"
    REVEAL_MINIMAL_SOLUTION = "RevealMinimalSolution"
    REFLECT_AND_GENERALIZE = "ReflectAndGeneralize"


class RefusalReason(str, Enum):
    """Public reason codes for a refused turn or assessment."""

    AGE_BAND_RESTRICTION = "AgeBandRestriction"
    HIGH_STAKES_CHEATING_ATTEMPT = "HighStakesCheatingAttempt"
    CONTRACT_VERSION_MISMATCH = "ContractVersionMismatch"


# Reason codes that may be disclosed to any viewer
PUBLIC_REASON_CODES = frozenset(reason.value for reason in RefusalReason)


class ActionType(str, Enum):
    """Tagged tutor actions attached to a turn plan."""

    OFFER_HINT = "offer_hint"
    OFFER_COUNTEREXAMPLE = "offer_counterexample"
    REVEAL_SOLUTION = "reveal_solution"
    NONE = "none"


class DialogueLimits:
    """Bounds for per-session dialogue state."""

    MAX_HISTORY_TURNS = 20
    MAX_UNCERTAINTIES = 10
    MAX_UNCERTAINTY_NOTE_CHARS = 80
