"""
Barangay Portal — Error Taxonomy
Every failure a resident operation can surface to a caller.
Handlers in app.main translate these into JSON responses.
"""


class ResidentServiceError(Exception):
    """Base class. `message` is safe to show to the caller."""

    status_code: int = 500

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(ResidentServiceError):
    """Missing/malformed fields, or a family head that does not resolve."""

    status_code = 400


class NotFoundError(ResidentServiceError):
    status_code = 404


class ForbiddenError(ResidentServiceError):
    status_code = 403


class ServerError(ResidentServiceError):
    """Unexpected storage or encoding failure. Message stays opaque."""

    status_code = 500

    def __init__(self, message: str = "Server error", errors: list[dict] | None = None):
        super().__init__(message, errors)
