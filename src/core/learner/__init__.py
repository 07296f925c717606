# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner model and Skill Graph Updater.

Key Components:
- LearnerProfile: Caller-supplied learner identity and safety flags
- LearningSessionObservation: Process observation emitted by the planner
- CognitiveSkillGraph / SkillState: Bounded per-learner skill evidence
- apply_observations: Deterministic fold of observations into the graph

Example usage:

    from src.core.learner import apply_observations, create_empty_skill_graph

    graph = create_empty_skill_graph(profile.learner_id)
    result = apply_observations(profile, graph, observations)
    for entry in result.audit:
        print(entry.action, entry.reason)
"""

from src.core.learner.constants import (
    FILTERED_AGE_BANDS,
    OBSERVATION_SKILL_MAP,
    PROHIBITED_VOCABULARY,
    AgeBand,
    CognitiveSkillId,
    ConfidenceBand,
    ObservationType,
    SkillThresholds,
    find_prohibited_terms,
)
from src.core.learner.models import (
    CognitiveSkillGraph,
    LearnerProfile,
    LearningSessionObservation,
    SafetyFlags,
    SkillAuditEntry,
    SkillState,
    SkillStateSnapshot,
    create_empty_skill_graph,
)
from src.core.learner.updater import (
    SkillGraphUpdateResult,
    admits_signal,
    apply_observations,
    compute_confidence_band,
    resolve_skill,
)

__all__ = [
    # Updater
    "apply_observations",
    "compute_confidence_band",
    "resolve_skill",
    "admits_signal",
    "SkillGraphUpdateResult",
    # Data structures
    "LearnerProfile",
    "SafetyFlags",
    "LearningSessionObservation",
    "CognitiveSkillGraph",
    "SkillState",
    "SkillStateSnapshot",
    "SkillAuditEntry",
    "create_empty_skill_graph",
    # Constants and enums
    "AgeBand",
    "ObservationType",
    "CognitiveSkillId",
    "ConfidenceBand",
    "SkillThresholds",
    "OBSERVATION_SKILL_MAP",
    "FILTERED_AGE_BANDS",
    "PROHIBITED_VOCABULARY",
    "find_prohibited_terms",
]
