"""Error taxonomy shared by the validator, the services and the API layer."""

from __future__ import annotations


class RecordError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RecordError):
    """A payload is missing required fields or carries non-numeric values.

    ``problem`` is one of ``missing_field``, ``non_numeric_field`` or
    ``invalid_date``; ``fields`` names the offending keys.
    """

    status_code = 400

    def __init__(self, problem: str, fields: list[str], message: str | None = None) -> None:
        self.problem = problem
        self.fields = fields
        if message is None:
            message = "Missing required fields or invalid numeric values."
        super().__init__(message)


class NotFound(RecordError):
    status_code = 404


class DuplicateKey(RecordError):
    status_code = 409


class InternalError(RecordError):
    """Any persistence or unexpected failure; the caller only sees a generic message."""

    status_code = 500

    def __init__(self, message: str = "Internal Server Error", detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail
