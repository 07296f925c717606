# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment eligibility guardrails.

Rules, checked in order:
- High-stakes assessment for a minor without a teacher: refused
- Learners aged 6-9 without a teacher: only low-pressure formats
  (active recall, teach-back) are allowed
"""

from src.core.assessment.base import AssessmentType
from src.core.dialogue.constants import RefusalReason
from src.core.dialogue.models import ContextFlags
from src.core.learner.constants import AgeBand
from src.core.learner.models import LearnerProfile

# Formats a 6-9 learner may take without a teacher present
YOUNG_LEARNER_ASSESSMENTS = frozenset(
    {AssessmentType.ACTIVE_RECALL, AssessmentType.TEACH_BACK}
)


def check_assessment_eligibility(
    profile: LearnerProfile,
    assessment_type: AssessmentType,
    context_flags: ContextFlags | None = None,
) -> RefusalReason | None:
    """Check if an assessment may be issued.

    Args:
        profile: Learner who would take the assessment.
        assessment_type: Requested format.
        context_flags: Situational flags for the turn.

    Returns:
        None when eligible, otherwise the refusal reason.
    """
    flags = context_flags or ContextFlags()

    if flags.is_high_stakes_assessment is True and profile.safety.minor and not flags.teacher_present:
        return RefusalReason.HIGH_STAKES_CHEATING_ATTEMPT

    if (
        profile.age_band == AgeBand.SIX_TO_NINE
        and profile.safety.minor
        and not flags.teacher_present
        and assessment_type not in YOUNG_LEARNER_ASSESSMENTS
    ):
        return RefusalReason.AGE_BAND_RESTRICTION

    return None
