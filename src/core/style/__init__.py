# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor turn style enforcement by age band."""

from src.core.style.enforcer import (
    KNOWN_HINTS,
    StyleLimits,
    apply_style_to_tutor_turn,
    parse_style_hint,
    simplify_language,
    trim_to_word_budget,
)
from src.core.style.profiles import (
    DEFAULT_STYLE_PROFILES,
    load_style_profiles,
    style_hint_for_profile,
)

__all__ = [
    "apply_style_to_tutor_turn",
    "parse_style_hint",
    "simplify_language",
    "trim_to_word_budget",
    "StyleLimits",
    "KNOWN_HINTS",
    "DEFAULT_STYLE_PROFILES",
    "load_style_profiles",
    "style_hint_for_profile",
]
