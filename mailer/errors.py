# mailer/errors.py
from typing import Optional


class HttpError(Exception):
    """Error carrying the HTTP status and a machine readable reason.

    ``details`` is an extra debug message for the server logs. It can contain
    sensitive data and is never serialized to the client.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        details: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        response = {"success": False, "error": self.message}
        if self.reason is not None:
            response["reason"] = self.reason
        return response


class BadRequestError(HttpError):
    status_code = 400


class UnauthorizedError(HttpError):
    status_code = 401

    def __init__(self, reason: str, details: Optional[str] = None):
        super().__init__("Unauthorized", reason=reason, details=details)


class ForbiddenError(HttpError):
    status_code = 403

    def __init__(self, details: Optional[str] = None):
        super().__init__("Forbidden", details=details)


class NotFoundError(HttpError):
    status_code = 404


class TryAgainLaterError(HttpError):
    """429 used both for real throttling and as a soft reject."""

    status_code = 429


class ConfigurationError(HttpError):
    """Deployment misconfiguration, not caused by the request."""

    status_code = 500

    def __init__(self, details: str):
        super().__init__(
            "Server configuration error",
            reason="server-configuration-error",
            details=details
        )
