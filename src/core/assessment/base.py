# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment descriptor contract.

Assessment content is produced by an external generator. This module
defines the contract the orchestrator calls through and the descriptor
it records. A descriptor says which assessment was issued, for whom and
on what; it never carries content or any evaluation of the learner.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.core.config.settings import CONTRACTS_VERSION
from src.core.learner.models import LearnerProfile


class AssessmentType(str, Enum):
    """Assessment formats a caller can request."""

    ACTIVE_RECALL = "ActiveRecall"
    CRITIQUE_AI_ANSWER = "CritiqueAIAnswer"
    ORAL_REASONING = "OralReasoning"
    TEACH_BACK = "TeachBack"


@dataclass(frozen=True)
class AssessmentDescriptor:
    """Record of an issued assessment.

    Attributes:
        type: Assessment format.
        session_id: Session it was issued in.
        learner_id: Learner it was issued to.
        topic: Topic it covers.
        objective: Learning objective it targets.
        contracts_version: Contract version of the issuing core.
    """

    type: AssessmentType
    session_id: str
    learner_id: str
    topic: str
    objective: str
    contracts_version: str = CONTRACTS_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "session_id": self.session_id,
            "learner_id": self.learner_id,
            "topic": self.topic,
            "objective": self.objective,
            "contracts_version": self.contracts_version,
        }


class AssessmentGenerator(ABC):
    """Abstract base class for assessment generators.

    Generators are only invoked once eligibility has been checked.
    """

    @abstractmethod
    def generate(
        self,
        assessment_type: AssessmentType,
        session_id: str,
        learner: LearnerProfile,
        topic: str,
        objective: str,
        contracts_version: str = CONTRACTS_VERSION,
    ) -> AssessmentDescriptor:
        """Issue an assessment.

        Args:
            assessment_type: Requested format.
            session_id: Current session.
            learner: Learner taking the assessment.
            topic: Topic under study.
            objective: Learning objective.
            contracts_version: Version to stamp on the descriptor.

        Returns:
            Descriptor for the issued assessment.
        """
        ...


class DescriptorAssessmentGenerator(AssessmentGenerator):
    """Default generator: records the descriptor without producing content."""

    def generate(
        self,
        assessment_type: AssessmentType,
        session_id: str,
        learner: LearnerProfile,
        topic: str,
        objective: str,
        contracts_version: str = CONTRACTS_VERSION,
    ) -> AssessmentDescriptor:
        return AssessmentDescriptor(
            type=assessment_type,
            session_id=session_id,
            learner_id=learner.learner_id,
            topic=topic,
            objective=objective,
            contracts_version=contracts_version,
        )
