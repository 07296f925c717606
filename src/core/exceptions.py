# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for the session core.

Guardrail refusals are returned as data, never raised. Exceptions are
reserved for malformed input:
- SessionCoreError: Base exception for all session core errors
- StoreValidationError: A store call received an unusable record or id
- SessionStateMismatchError: A dialogue state was threaded into the
  wrong session
"""


class SessionCoreError(Exception):
    """Base exception for all session core errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize session core error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class StoreValidationError(SessionCoreError, ValueError):
    """Malformed input to the bounded store.

    Raised for missing session or learner ids. Cap overflow is never an
    error; it evicts.
    """


class SessionStateMismatchError(SessionCoreError, ValueError):
    """A previous dialogue state belongs to a different session.

    Attributes:
        expected_session_id: Session id of the request.
        actual_session_id: Session id carried by the state.
    """

    def __init__(self, expected_session_id: str, actual_session_id: str):
        """Initialize session state mismatch error.

        Args:
            expected_session_id: Session id of the request.
            actual_session_id: Session id carried by the state.
        """
        self.expected_session_id = expected_session_id
        self.actual_session_id = actual_session_id
        super().__init__(
            "Dialogue state belongs to a different session",
            details={"expected": expected_session_id, "actual": actual_session_id},
        )


class LearnerProfileMismatchError(SessionCoreError, ValueError):
    """A resumed turn carries a learner profile other than the session's.

    The profile is fixed when the session is created, so guardrails always
    judge the learner the session was opened for.

    Attributes:
        session_id: Session being resumed.
        expected_learner_id: Learner id recorded in the dialogue state.
        actual_learner_id: Learner id carried by the request.
    """

    def __init__(self, session_id: str, expected_learner_id: str, actual_learner_id: str):
        self.session_id = session_id
        self.expected_learner_id = expected_learner_id
        self.actual_learner_id = actual_learner_id
        super().__init__(
            "Learner profile differs from the one the session was created with",
            details={
                "session_id": session_id,
                "expected": expected_learner_id,
                "actual": actual_learner_id,
            },
        )
