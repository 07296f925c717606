# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment contract and eligibility.

Assessment content lives outside this package; here the orchestrator
checks eligibility and records which assessment was issued.
"""

from src.core.assessment.base import (
    AssessmentDescriptor,
    AssessmentGenerator,
    AssessmentType,
    DescriptorAssessmentGenerator,
)
from src.core.assessment.eligibility import (
    YOUNG_LEARNER_ASSESSMENTS,
    check_assessment_eligibility,
)

__all__ = [
    "AssessmentType",
    "AssessmentDescriptor",
    "AssessmentGenerator",
    "DescriptorAssessmentGenerator",
    "check_assessment_eligibility",
    "YOUNG_LEARNER_ASSESSMENTS",
]
