"""
Error taxonomy for the timesheet workflow.

Services raise these; timetrack.main turns them into JSON responses.
"""

from pydantic import ValidationError as PydanticValidationError


class TimesheetError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(TimesheetError):
    """Malformed or out-of-range input. Carries per-field messages."""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]], message: str = "The given data was invalid."):
        super().__init__(message)
        self.errors = errors

    def to_body(self) -> dict:
        return {"message": self.message, "errors": self.errors}

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        return cls(field_errors(exc.errors()))


class ConflictError(TimesheetError):
    status_code = 409


class AuthorizationError(TimesheetError):
    status_code = 403


class NotFoundError(TimesheetError):
    status_code = 404


class AuthenticationError(TimesheetError):
    status_code = 401


_REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def field_errors(errors: list[dict]) -> dict[str, list[str]]:
    """Group pydantic error dicts by field name.

    FastAPI prefixes request errors with where the value came from
    ("body", "query"); that prefix is dropped from the key.
    """
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        key = ".".join(loc) or "__root__"
        grouped.setdefault(key, []).append(err.get("msg", "Invalid value"))
    return grouped
