# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Skill Graph Updater.

Folds learning-session observations into a learner's cognitive skill
graph, deterministically and with an audit entry for every change.

Rules:
- Every routed observation increments exposures for its skill
- Its strength joins the skill's recent signal ring unless the learner is
  a young minor and the strength is at or below the admission threshold
- The confidence band is recomputed after every fold and is never lowered
  within a single call
- When nothing applies, the input graph is returned unchanged (same object)
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.core.learner.constants import (
    FILTERED_AGE_BANDS,
    OBSERVATION_SKILL_MAP,
    CognitiveSkillId,
    ConfidenceBand,
    SkillThresholds,
)
from src.core.learner.models import (
    CognitiveSkillGraph,
    LearnerProfile,
    LearningSessionObservation,
    SkillAuditEntry,
    SkillState,
)

logger = logging.getLogger(__name__)


@dataclass
class SkillGraphUpdateResult:
    """Result of folding a batch of observations.

    Attributes:
        graph: New graph, or the input graph itself if nothing applied.
        audit: One entry per skill mutation, in fold order.
    """

    graph: CognitiveSkillGraph
    audit: list[SkillAuditEntry] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Check if any observation was folded."""
        return bool(self.audit)


def compute_confidence_band(exposures: int, recent_signals: Sequence[float]) -> ConfidenceBand:
    """Derive the confidence band from exposures and signal density.

    Args:
        exposures: Number of observations seen for the skill.
        recent_signals: Admitted recent strengths.

    Returns:
        Low by default, Medium or High once both exposure and
        mean-signal thresholds are met.
    """
    mean = sum(recent_signals) / len(recent_signals) if recent_signals else 0.0

    if (
        exposures >= SkillThresholds.HIGH_MIN_EXPOSURES
        and mean >= SkillThresholds.HIGH_MIN_MEAN_SIGNAL
    ):
        return ConfidenceBand.HIGH
    if (
        exposures >= SkillThresholds.MEDIUM_MIN_EXPOSURES
        and mean >= SkillThresholds.MEDIUM_MIN_MEAN_SIGNAL
    ):
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.LOW


def resolve_skill(observation: LearningSessionObservation) -> CognitiveSkillId | None:
    """Route an observation to a skill.

    A skill hint naming a known skill wins; otherwise the observation
    type's default skill is used.
    """
    if observation.skill_hint:
        try:
            return CognitiveSkillId(observation.skill_hint)
        except ValueError:
            logger.debug("Ignoring unknown skill hint %r", observation.skill_hint)
    return OBSERVATION_SKILL_MAP.get(observation.type)


def admits_signal(profile: LearnerProfile, strength: float) -> bool:
    """Check if an observation's strength joins the recent signal ring.

    Young minors only keep signals above the admission threshold; every
    other learner keeps all signals.
    """
    if profile.safety.minor and profile.age_band in FILTERED_AGE_BANDS:
        return strength > SkillThresholds.YOUNG_LEARNER_MIN_STRENGTH
    return True


def apply_observations(
    profile: LearnerProfile,
    graph: CognitiveSkillGraph,
    observations: Sequence[LearningSessionObservation],
) -> SkillGraphUpdateResult:
    """Fold observations into a skill graph.

    The input graph is never mutated.

    Args:
        profile: Learner the graph belongs to.
        graph: Current skill graph.
        observations: Observations in the order they were made.

    Returns:
        SkillGraphUpdateResult with the new graph and audit trail.
    """
    routed = [(obs, resolve_skill(obs)) for obs in observations]
    routed = [(obs, skill_id) for obs, skill_id in routed if skill_id is not None]

    if not routed:
        return SkillGraphUpdateResult(graph=graph)

    new_graph = graph.copy()
    audit: list[SkillAuditEntry] = []
    # Highest band reached per skill during this call
    band_floor: dict[CognitiveSkillId, ConfidenceBand] = {}

    for observation, skill_id in routed:
        state = new_graph.skills.setdefault(skill_id, SkillState())
        before = state.snapshot()

        state.exposures += 1
        if admits_signal(profile, observation.strength):
            state.recent_signals.append(observation.strength)
            action = "Added signal"
            reason = (
                f"Observed {observation.type.value} with strength "
                f"{observation.strength:.2f}"
            )
        else:
            action = "Recorded exposure"
            reason = (
                f"Observed {observation.type.value} with strength "
                f"{observation.strength:.2f}; below the admission threshold "
                f"for this age band, so only the exposure was counted"
            )
        after_fold = state.snapshot()
        audit.append(
            SkillAuditEntry(
                skill_id=skill_id,
                action=action,
                reason=reason,
                previous_state=before,
                new_state=after_fold,
            )
        )

        computed = compute_confidence_band(state.exposures, state.recent_signals)
        floor = band_floor.get(skill_id)
        if floor is not None and floor.order > computed.order:
            computed = floor
        band_floor[skill_id] = computed

        if computed != state.confidence_band:
            previous_band = state.confidence_band
            state.confidence_band = computed
            audit.append(
                SkillAuditEntry(
                    skill_id=skill_id,
                    action="Updated confidence band",
                    reason=(
                        f"Confidence band changed from {previous_band.value} to "
                        f"{computed.value} after {state.exposures} exposures with "
                        f"mean signal {state.mean_signal:.2f}"
                    ),
                    previous_state=after_fold,
                    new_state=state.snapshot(),
                )
            )

    logger.debug(
        "Folded %d observations into %d skills for learner %s",
        len(routed),
        len(band_floor),
        graph.learner_id,
    )
    return SkillGraphUpdateResult(graph=new_graph, audit=audit)
