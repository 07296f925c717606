"""Socratic Session Core.

Deterministic session orchestration for one-on-one Socratic tutoring:
turn planning with guardrails, bounded learner skill modelling, assessment
eligibility, a bounded store and role-scoped visibility filters.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
