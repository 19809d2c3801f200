"""
Failure classification.

Every failure the table service can surface is a KnownError carrying a
FailureKind, a user-appropriate message and an optional suggestion. The API
layer turns KnownError into a FailureDetail body with the error's status
code.

Data-shape problems in card records are never failures: the parser and the
engine degrade field by field instead.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    INVALID_TABLE = "invalid_table"

    # Caller identity
    UNAUTHENTICATED = "unauthenticated"

    # Resource failures
    NOT_FOUND = "not_found"

    # Engine failures
    EXPORT_FAILED = "export_failed"
    ACTION_NOT_AVAILABLE = "action_not_available"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"

    UNKNOWN = "unknown"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail response body."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ExportError(KnownError):
    """
    Raised when a CSV export cannot be produced.

    No partial file is ever delivered alongside this error.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.EXPORT_FAILED,
            message="The table could not be exported to CSV.",
            detail=detail,
            suggestion="Try again, or narrow the table with a search first.",
            status_code=500,
        )


class ActionNotAvailableError(KnownError):
    """Raised when a row action is dispatched that is hidden or disabled for that row."""

    def __init__(self, action: str, record_id: int | str):
        self.action = action
        self.record_id = record_id
        super().__init__(
            kind=FailureKind.ACTION_NOT_AVAILABLE,
            message=f"The '{action}' action is not available for this card.",
            detail=f"record_id={record_id}",
            status_code=409,
        )


class CardFetchError(KnownError):
    """Raised by page loaders when the card API fetch fails."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="Cards could not be loaded.",
            detail=detail,
            suggestion="Check your connection and try again.",
            status_code=502,
        )
