# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Age-band style profiles.

Maps each age band to the style hint the orchestrator applies to tutor
turns. Operators can override individual bands from a YAML file:

    profiles:
      teen: "short, two_questions_max, critique_friendly"
"""

import logging
from pathlib import Path

from src.core.config.yaml_loader import YAMLLoadError, load_overrides
from src.core.learner.constants import AgeBand
from src.core.learner.models import LearnerProfile

logger = logging.getLogger(__name__)

DEFAULT_STYLE_PROFILES: dict[AgeBand, str] = {
    AgeBand.SIX_TO_NINE: "very_short, one_question, examples_first, playful_tone",
    AgeBand.TEN_TO_TWELVE: "short, one_question, examples_first, encouraging_tone",
    AgeBand.TEEN: "medium_length, two_questions_max, critique_friendly",
    AgeBand.ADULT: "full_length, flexible_scaffolding",
}


def load_style_profiles(path: Path | None = None) -> dict[AgeBand, str]:
    """Load style profiles, merging YAML overrides over the defaults.

    Args:
        path: Optional YAML file with a top-level ``profiles`` mapping
            keyed by age band value.

    Returns:
        Mapping from every age band to its style hint.

    Raises:
        YAMLLoadError: If the file cannot be loaded or names an unknown
            age band.
    """
    if path is None:
        return dict(DEFAULT_STYLE_PROFILES)

    defaults = {"profiles": {band.value: hint for band, hint in DEFAULT_STYLE_PROFILES.items()}}
    profiles = load_overrides(path, defaults, section="profiles")

    result: dict[AgeBand, str] = {}
    for key, hint in profiles.items():
        try:
            band = AgeBand(str(key))
        except ValueError as e:
            raise YAMLLoadError(path, f"Unknown age band '{key}'") from e
        result[band] = str(hint or "")

    logger.info("Loaded style profiles from %s", path)
    return result


def style_hint_for_profile(
    profile: LearnerProfile,
    calm_mode: bool = False,
    profiles: dict[AgeBand, str] | None = None,
) -> str:
    """Get the style hint for a learner.

    Args:
        profile: Learner profile.
        calm_mode: Prepend the calm_mode hint.
        profiles: Profile table; defaults to DEFAULT_STYLE_PROFILES.

    Returns:
        Comma-separated style hint, possibly empty.
    """
    table = profiles if profiles is not None else DEFAULT_STYLE_PROFILES
    hint = table.get(profile.age_band, "")
    if calm_mode:
        return f"calm_mode, {hint}" if hint else "calm_mode"
    return hint
