# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bounded in-memory learning store.

Holds session records and learner state under hard caps. Exceeding a
cap is not an error: the oldest entries are evicted first.

Concurrency:
- Writes and reads for one learner are serialized by that learner's lock
- Different learners never contend beyond a short registry lookup
- Read-modify-write goes through update_session / update_learner_state,
  which hold the learner's lock for the whole update
- Every read returns a copy taken under the lock, so callers never see
  a half-evicted record set and cannot mutate stored state
- Locks exist only for learners with stored data; reads for unknown
  learners never allocate one

Example:
    >>> store = InMemoryLearningStore()
    >>> store.append_session(record)
    >>> store.list_sessions(record.learner_id, limit=10)
"""

import threading
from collections import OrderedDict
from collections.abc import Callable

from src.core.config.settings import StoreSettings, get_settings
from src.core.exceptions import StoreValidationError
from src.core.store.models import StoredLearnerState, StoredSessionRecord
from src.utils.logging import get_logger

logger = get_logger(__name__)

SessionUpdate = Callable[[StoredSessionRecord | None], StoredSessionRecord]
LearnerStateUpdate = Callable[[StoredLearnerState | None], StoredLearnerState]


class InMemoryLearningStore:
    """Bounded, thread-safe in-memory store.

    Sessions are kept per learner in insertion order. Overwriting a
    session keeps its original position, so eviction order follows first
    insertion.
    """

    def __init__(
        self,
        settings: StoreSettings | None = None,
        contracts_version: str | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            settings: Cap settings; defaults to the configured ones.
            contracts_version: Version stored records are expected to carry.
        """
        app_settings = get_settings()
        self._settings = settings or app_settings.store
        self._contracts_version = contracts_version or app_settings.tutoring.contracts_version

        self._registry_lock = threading.Lock()
        self._learner_locks: dict[str, threading.Lock] = {}
        self._session_owner: dict[str, str] = {}

        self._sessions: dict[str, OrderedDict[str, StoredSessionRecord]] = {}
        self._learner_states: dict[str, StoredLearnerState] = {}

    @property
    def settings(self) -> StoreSettings:
        """Cap settings in force."""
        return self._settings

    @property
    def contracts_version(self) -> str:
        """Contract version stored records are expected to carry."""
        return self._contracts_version

    def _lock_for(self, learner_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._learner_locks.get(learner_id)
            if lock is None:
                lock = threading.Lock()
                self._learner_locks[learner_id] = lock
            return lock

    def _existing_lock(self, learner_id: str) -> "threading.Lock | None":
        with self._registry_lock:
            return self._learner_locks.get(learner_id)

    def _owner_of(self, session_id: str) -> str | None:
        with self._registry_lock:
            return self._session_owner.get(session_id)

    def _check_session_ids(self, session_id: str, learner_id: str) -> None:
        if not session_id:
            raise StoreValidationError("Session record is missing session_id")
        if not learner_id:
            raise StoreValidationError(
                "Session record is missing learner_id",
                details={"session_id": session_id},
            )

        owner = self._owner_of(session_id)
        if owner is not None and owner != learner_id:
            raise StoreValidationError(
                "Session already belongs to another learner",
                details={"session_id": session_id},
            )

    def _clamp_session(self, record: StoredSessionRecord) -> StoredSessionRecord:
        max_turns = self._settings.max_turns_per_session
        max_observations = self._settings.max_observations_per_session
        if len(record.tutor_turns) > max_turns:
            record.tutor_turns = record.tutor_turns[-max_turns:]
        if len(record.observations) > max_observations:
            record.observations = record.observations[-max_observations:]
        return record

    def _clamp_learner_state(self, state: StoredLearnerState) -> StoredLearnerState:
        max_runs = self._settings.max_kernel_runs_per_learner
        if len(state.kernel_runs) > max_runs:
            state.kernel_runs = state.kernel_runs[-max_runs:]
        return state

    def _put_session(self, record: StoredSessionRecord) -> list[str]:
        # Caller holds the learner's lock
        sessions = self._sessions.setdefault(record.learner_id, OrderedDict())
        sessions[record.session_id] = record
        evicted: list[str] = []
        while len(sessions) > self._settings.max_sessions_per_learner:
            evicted_id, _ = sessions.popitem(last=False)
            evicted.append(evicted_id)

        with self._registry_lock:
            self._session_owner[record.session_id] = record.learner_id
            for evicted_id in evicted:
                self._session_owner.pop(evicted_id, None)
        return evicted

    def _warn_on_version(self, kind: str, key: str, version: str) -> None:
        if version != self._contracts_version:
            logger.warning(
                "store_contract_version_mismatch",
                kind=kind,
                key=key,
                version=version,
                expected=self._contracts_version,
            )

    def _log_evictions(self, learner_id: str, evicted: list[str]) -> None:
        if evicted:
            logger.debug(
                "sessions_evicted",
                learner_id=learner_id,
                count=len(evicted),
            )

    def append_session(self, record: StoredSessionRecord) -> None:
        """Insert or overwrite a session record, then enforce every cap.

        Args:
            record: Session record to store (copied).

        Raises:
            StoreValidationError: If the session or learner id is missing,
                or the session id already belongs to another learner.
        """
        self._check_session_ids(record.session_id, record.learner_id)

        if record.session_trace is not None:
            self._warn_on_version(
                "session", record.session_id, record.session_trace.contracts_version
            )

        stored = self._clamp_session(record.copy())
        with self._lock_for(record.learner_id):
            evicted = self._put_session(stored)

        self._log_evictions(record.learner_id, evicted)

    def update_session(
        self,
        session_id: str,
        learner_id: str,
        update: SessionUpdate,
    ) -> StoredSessionRecord:
        """Atomically read, modify and write one session record.

        ``update`` runs under the learner's lock. It receives a copy of the
        stored record (None if there is none) and returns the record to
        store. It must not call back into the store.

        Args:
            session_id: Session to update.
            learner_id: Learner owning the session.
            update: Function producing the new record.

        Returns:
            Copy of the stored (clamped) record.

        Raises:
            StoreValidationError: If an id is missing, the session belongs to
                another learner, or ``update`` returns a record for a
                different session or learner.
        """
        self._check_session_ids(session_id, learner_id)

        with self._lock_for(learner_id):
            current = self._sessions.get(learner_id, OrderedDict()).get(session_id)
            record = update(current.copy() if current is not None else None)
            if record.session_id != session_id or record.learner_id != learner_id:
                raise StoreValidationError(
                    "Updated record does not match the session being updated",
                    details={"session_id": session_id},
                )
            stored = self._clamp_session(record.copy())
            evicted = self._put_session(stored)
            result = stored.copy()

        if result.session_trace is not None:
            self._warn_on_version("session", session_id, result.session_trace.contracts_version)
        self._log_evictions(learner_id, evicted)
        return result

    def get_session(self, session_id: str) -> StoredSessionRecord | None:
        """Get a copy of a session record.

        Raises:
            StoreValidationError: If session_id is empty.
        """
        if not session_id:
            raise StoreValidationError("session_id is required")

        learner_id = self._owner_of(session_id)
        if learner_id is None:
            return None
        lock = self._existing_lock(learner_id)
        if lock is None:
            return None

        with lock:
            record = self._sessions.get(learner_id, OrderedDict()).get(session_id)
            return record.copy() if record else None

    def list_sessions(self, learner_id: str, limit: int | None = None) -> list[StoredSessionRecord]:
        """List a learner's sessions, newest first.

        Args:
            learner_id: Learner to list.
            limit: Maximum number of records to return.

        Returns:
            Copies of the learner's session records.

        Raises:
            StoreValidationError: If learner_id is empty or limit is negative.
        """
        if not learner_id:
            raise StoreValidationError("learner_id is required")
        if limit is not None and limit < 0:
            raise StoreValidationError("limit must not be negative", details={"limit": limit})

        lock = self._existing_lock(learner_id)
        if lock is None:
            return []

        with lock:
            records = list(reversed(self._sessions.get(learner_id, OrderedDict()).values()))
            if limit is not None:
                records = records[:limit]
            return [record.copy() for record in records]

    def save_learner_state(self, state: StoredLearnerState) -> None:
        """Upsert a learner's state, keeping the newest kernel runs.

        Raises:
            StoreValidationError: If the state has no learner id.
        """
        if not state.learner_id:
            raise StoreValidationError("Learner state is missing learner_id")

        self._warn_on_version("learner_state", state.learner_id, state.version)

        stored = self._clamp_learner_state(state.copy())
        with self._lock_for(state.learner_id):
            self._learner_states[state.learner_id] = stored

    def update_learner_state(
        self,
        learner_id: str,
        update: LearnerStateUpdate,
    ) -> StoredLearnerState:
        """Atomically read, modify and write a learner's state.

        ``update`` runs under the learner's lock. It receives a copy of the
        stored state (None if there is none) and returns the state to store.
        It must not call back into the store.

        Returns:
            Copy of the stored (clamped) state.

        Raises:
            StoreValidationError: If learner_id is empty or ``update`` returns
                a state for another learner.
        """
        if not learner_id:
            raise StoreValidationError("learner_id is required")

        with self._lock_for(learner_id):
            current = self._learner_states.get(learner_id)
            state = update(current.copy() if current is not None else None)
            if state.learner_id != learner_id:
                raise StoreValidationError(
                    "Updated state belongs to another learner",
                    details={"learner_id": learner_id},
                )
            stored = self._clamp_learner_state(state.copy())
            self._learner_states[learner_id] = stored
            result = stored.copy()

        self._warn_on_version("learner_state", learner_id, result.version)
        return result

    def get_learner_state(self, learner_id: str) -> StoredLearnerState | None:
        """Get a copy of a learner's state.

        Raises:
            StoreValidationError: If learner_id is empty.
        """
        if not learner_id:
            raise StoreValidationError("learner_id is required")

        lock = self._existing_lock(learner_id)
        if lock is None:
            return None

        with lock:
            state = self._learner_states.get(learner_id)
            return state.copy() if state else None
