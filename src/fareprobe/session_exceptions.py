"""Session lifecycle exceptions.

This module contains exceptions raised by the orchestrator and the
per-session state machine.
"""

from .base_exceptions import FareprobeException


class SessionException(FareprobeException):
    """Base exception for session-related errors."""

    pass


class SessionConflictError(SessionException):
    """Raised when a session is started for an app that already has an active one."""

    def __init__(self, app_id: str, existing_session_id: str, **kwargs) -> None:
        """Initialize with the conflicting app and session."""
        super().__init__(
            f"An active session already exists for '{app_id}' ({existing_session_id})",
            error_code="SESSION_CONFLICT",
            context={"app_id": app_id, "existing_session_id": existing_session_id, **kwargs},
        )
        self.existing_session_id = existing_session_id


class SessionNotFoundError(SessionException):
    """Raised when a session id is not known to the orchestrator."""

    def __init__(self, session_id: str, **kwargs) -> None:
        """Initialize with session id."""
        super().__init__(
            f"Session '{session_id}' not found",
            error_code="SESSION_NOT_FOUND",
            context={"session_id": session_id, **kwargs},
        )


class TerminalStateError(SessionException):
    """Raised when a session that already finished is asked to finish again."""

    def __init__(self, session_id: str, current_state: str, attempted_state: str, **kwargs) -> None:
        """Initialize with transition details."""
        super().__init__(
            f"Session '{session_id}' is already terminal ({current_state}); "
            f"cannot move to '{attempted_state}'",
            error_code="ALREADY_TERMINAL",
            context={
                "session_id": session_id,
                "current_state": current_state,
                "attempted_state": attempted_state,
                **kwargs,
            },
        )
