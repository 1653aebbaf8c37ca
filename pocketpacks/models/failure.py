"""
Failure Explanation Envelope - Unified Response Classification.

Every API endpoint communicates its outcome through ApiResponse.

Response types:
- Success: Operation completed successfully
- Refusal: System chose not to proceed (expected, explainable)
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed

All user-visible responses pass through `finalize_response()`.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Resource failures
    SET_NOT_LOADED = "set_not_loaded"
    NO_CARDS_AVAILABLE = "no_cards_available"
    CARD_NOT_FOUND = "card_not_found"

    # Constraint violations
    INSUFFICIENT_FUNDS = "insufficient_funds"

    # Service failures
    PERSISTENCE_UNAVAILABLE = "persistence_unavailable"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    REFUSAL = "refusal"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


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


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope for API endpoints.

    Every response is classified into one of four outcome types.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
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

    def to_response(self) -> ApiResponse[Any]:
        """Convert to a finalized ApiResponse."""
        return finalize_response(
            ApiResponse(
                outcome=OutcomeType.KNOWN_FAILURE,
                failure=FailureDetail(
                    kind=self.kind,
                    message=self.message,
                    detail=self.detail,
                    suggestion=self.suggestion,
                ),
            )
        )


class SetNotLoadedError(KnownError):
    """Raised when a pack is requested for a set with no registered catalog."""

    def __init__(self, set_code: str) -> None:
        self.set_code = set_code
        super().__init__(
            kind=FailureKind.SET_NOT_LOADED,
            message=f"No card catalog is loaded for set '{set_code}'.",
            suggestion="Register the set's card pools before opening packs.",
            status_code=404,
        )


class NoCardsAvailableError(KnownError):
    """
    Raised when every rarity pool is empty.

    The pack composer catches this per slot and drops the slot.
    """

    def __init__(self, requested_tier: str) -> None:
        self.requested_tier = requested_tier
        super().__init__(
            kind=FailureKind.NO_CARDS_AVAILABLE,
            message="No cards are available in any rarity pool.",
            detail=f"Requested tier: {requested_tier}",
            status_code=409,
        )


class CardNotFoundError(KnownError):
    """Raised when a collector number is not in a set's main pool."""

    def __init__(self, set_code: str, collector_number: str) -> None:
        self.set_code = set_code
        self.collector_number = collector_number
        super().__init__(
            kind=FailureKind.CARD_NOT_FOUND,
            message=f"No card with collector number '{collector_number}' in set '{set_code}'.",
            status_code=404,
        )


STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.REFUSAL: (
        "The system cannot proceed with this request due to a constraint violation."
    ),
    OutcomeType.KNOWN_FAILURE: "The operation failed due to a known issue.",
    OutcomeType.UNKNOWN_FAILURE: (
        "I failed and I don't know why. Try simplifying the request or retrying."
    ),
}

STANDARD_SUGGESTIONS: dict[OutcomeType, str] = {
    OutcomeType.REFUSAL: "Please modify your request to satisfy the constraint.",
    OutcomeType.KNOWN_FAILURE: "Check the error details and adjust your request.",
    OutcomeType.UNKNOWN_FAILURE: "If this persists, please report the issue.",
}


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Validate a response before it leaves the API.

    Success carries no failure detail; every other outcome must carry one.

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    else:
        if response.failure is None:
            raise ValueError(f"{response.outcome.value} response must have failure details")

    return response


def create_unknown_failure(exception: Exception) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed; only the exception type is reported.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail=type(exception).__name__,
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE],
        ),
    )

    return finalize_response(response)


def create_refusal(kind: FailureKind, constraint: str) -> ApiResponse[Any]:
    """
    Create a refusal response.

    Args:
        kind: The classification of the constraint violation
        constraint: Description of the constraint that was not met
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.REFUSAL,
        failure=FailureDetail(
            kind=kind,
            message=STANDARD_MESSAGES[OutcomeType.REFUSAL],
            detail=f"Constraint violated: {constraint}",
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.REFUSAL],
        ),
    )

    return finalize_response(response)


def create_success(data: T) -> ApiResponse[T]:
    """Create a finalized success response."""
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    finalize_response(response)
    return response
