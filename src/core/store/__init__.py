# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bounded store and visibility filters.

Key Components:
- InMemoryLearningStore: Capped, per-learner locked session and state store
- filter_session_for_viewer / filter_learner_state_for_viewer: Role-scoped,
  sanitized views
- record_session_turn: Projects orchestrator output into the store
"""

from src.core.store.memory_store import InMemoryLearningStore
from src.core.store.models import (
    KernelDecision,
    KernelRunRecord,
    KernelTraceNode,
    StoredLearnerState,
    StoredSessionRecord,
)
from src.core.store.recording import record_kernel_run, record_session_turn
from src.core.store.visibility import (
    ACCESS_DENIED_NOTE,
    LearnerStateView,
    SessionView,
    ViewerRole,
    VisibilityPolicy,
    can_view,
    filter_learner_state_for_viewer,
    filter_session_for_viewer,
    get_visibility_policy,
)

__all__ = [
    # Store
    "InMemoryLearningStore",
    "record_session_turn",
    "record_kernel_run",
    # Records
    "StoredSessionRecord",
    "StoredLearnerState",
    "KernelRunRecord",
    "KernelDecision",
    "KernelTraceNode",
    # Visibility
    "ViewerRole",
    "VisibilityPolicy",
    "SessionView",
    "LearnerStateView",
    "ACCESS_DENIED_NOTE",
    "get_visibility_policy",
    "can_view",
    "filter_session_for_viewer",
    "filter_learner_state_for_viewer",
]
