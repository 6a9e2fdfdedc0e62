"""Root of the fareprobe error family.

Every error fareprobe raises carries a stable ``error_code`` and a
``context`` dict naming the app, session or command involved, so the
CLI and embedding hosts can report failures in the same camelCase shape
as listener payloads.
"""

from typing import Any

# Context keys promoted to top-level payload fields
_PROMOTED_KEYS = {"app_id": "appId", "session_id": "sessionId"}


class FareprobeException(Exception):
    """Base exception for all fareprobe errors.

    Attributes:
        message: Human-readable error message
        error_code: Stable code such as ``SESSION_NOT_FOUND``, if any
        context: Values describing what failed (app id, session id, command...)
    """

    def __init__(
        self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    @property
    def app_id(self) -> str | None:
        """Target app the error concerns, when known."""
        return self.context.get("app_id")

    @property
    def session_id(self) -> str | None:
        """Automation session the error concerns, when known."""
        return self.context.get("session_id")

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready description of the error.

        ``app_id`` and ``session_id`` become ``appId`` / ``sessionId``; the
        rest of the context is kept under ``context``.

        Returns:
            Dict with ``error``, ``message`` and the promoted ids
        """
        payload: dict[str, Any] = {"error": self.error_code, "message": self.message}
        for key, field in _PROMOTED_KEYS.items():
            if self.context.get(key) is not None:
                payload[field] = self.context[key]
        payload["context"] = {
            key: value for key, value in self.context.items() if key not in _PROMOTED_KEYS
        }
        return payload

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message
