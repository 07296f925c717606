# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the Socratic session core.

This package contains the session logic and shared configuration:
- config: Settings and YAML loading
- learner: Learner profile, skill graph and Skill Graph Updater
- dialogue: Dialogue Turn Planner and scaffold ladder
- style: Age-band styling of tutor turns
- assessment: Assessment contract and eligibility
- session: Session Orchestrator
- store: Bounded store and visibility filters
"""
