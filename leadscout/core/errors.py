from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """A request-level failure rendered as `{success: false, message, error}`."""

    def __init__(self, status_code: int, message: str, error: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error

    def to_body(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body
