"""
Failure Classification — Errors and the API Failure Envelope.

Every error cardsmith raises on purpose derives from CardsmithError and
carries a FailureKind. The same classification backs the HTTP envelope
returned by the preset API.

Error families:
- ResolutionError: raised while resolving a drawing command's options,
  always BEFORE any card is handed to the rendering sink
- InvalidLayoutError: a layout source is malformed
- ConfigError: a deck configuration file is malformed
- PresetError: a preset or vendor lookup failed at construction time

INVARIANT: A missing layout entry is NOT an error. Drawing commands fall
back to built-in defaults and a warning is logged.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Option resolution failures
    INVALID_UNIT = "invalid_unit"
    RANGE_OUT_OF_BOUNDS = "range_out_of_bounds"
    INVALID_RANGE = "invalid_range"
    ARITY_MISMATCH = "arity_mismatch"
    INVALID_OPTION = "invalid_option"
    INPUT_FILE_NOT_FOUND = "input_file_not_found"

    # Source failures
    INVALID_LAYOUT = "invalid_layout"
    INVALID_CONFIG = "invalid_config"

    # Construction failures
    UNKNOWN_PRESET = "unknown_preset"
    UNKNOWN_VENDOR = "unknown_vendor"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
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
        description="Explanation of what went wrong",
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
    """Response envelope for API endpoints."""

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

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )


# =============================================================================
# EXCEPTION HIERARCHY
# =============================================================================


class CardsmithError(Exception):
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
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ResolutionError(CardsmithError):
    """
    Base exception for failures while resolving a drawing command.

    The whole command is aborted. No card in the range has been rendered.
    """


class InvalidUnitError(ResolutionError):
    """Raised when a physical-length expression is malformed or out of domain."""

    def __init__(self, key: str | None, value: Any, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        where = f" for '{key}'" if key else ""
        super().__init__(
            kind=FailureKind.INVALID_UNIT,
            message=f"Invalid unit value {value!r}{where}: {reason}",
            suggestion="Use an integer pixel count or a length such as '2.5in', '63mm' or '12pt'.",
        )


class RangeOutOfBoundsError(ResolutionError):
    """Raised when a range names a card index outside the deck."""

    def __init__(self, index: int, deck_size: int):
        self.index = index
        self.deck_size = deck_size
        super().__init__(
            kind=FailureKind.RANGE_OUT_OF_BOUNDS,
            message=f"Card index {index} is out of bounds for a deck of {deck_size} cards",
            detail=f"valid indices: 0..{deck_size - 1}" if deck_size else "deck is empty",
        )


class InvalidRangeError(ResolutionError):
    """Raised when a range expression is not 'all', an index or a list of indices."""

    def __init__(self, expr: Any, reason: str):
        self.expr = expr
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_RANGE,
            message=f"Invalid range {expr!r}: {reason}",
        )


class ArityMismatchError(ResolutionError):
    """
    Raised when a per-card sequence does not match the deck size.

    Broadcasting never pads or truncates.
    """

    def __init__(self, key: str, expected: int, actual: int):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            kind=FailureKind.ARITY_MISMATCH,
            message=(
                f"Option '{key}' has {actual} per-card values, "
                f"expected {expected} (one per card in the deck)"
            ),
            detail=f"key={key} expected={expected} actual={actual}",
            suggestion="Pass a single value to apply it to every card.",
        )


class InvalidOptionError(ResolutionError):
    """Raised when an option value is outside the domain its key accepts."""

    def __init__(self, key: str, value: Any, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_OPTION,
            message=f"Invalid value {value!r} for '{key}': {reason}",
        )


class InputFileNotFoundError(ResolutionError):
    """Raised when an input file referenced by a command does not exist."""

    def __init__(self, key: str, path: str):
        self.key = key
        self.path = path
        super().__init__(
            kind=FailureKind.INPUT_FILE_NOT_FOUND,
            message=f"File {path} does not exist (option '{key}')",
            suggestion="Check the path, or the img_dir setting of the deck configuration.",
            status_code=404,
        )


class InvalidLayoutError(CardsmithError):
    """Raised when a layout source cannot be turned into layout entries."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_LAYOUT,
            message=f"Invalid layout {source}: {reason}",
        )


class ConfigError(CardsmithError):
    """Raised when a deck configuration file is malformed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_CONFIG,
            message=f"Invalid configuration {source}: {reason}",
        )


class PresetError(CardsmithError):
    """Base exception for preset and vendor lookup failures."""


class UnknownPresetError(PresetError, LookupError):
    """
    Raised when a card type has no registered preset.

    Deliberately a LookupError and never an AttributeError, so attribute
    fallbacks can tell "no such preset" apart from "no such attribute".
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            kind=FailureKind.UNKNOWN_PRESET,
            message=f"No preset registered for card type '{name}'",
            status_code=404,
        )


class UnknownVendorError(PresetError, LookupError):
    """Raised when a named vendor has no override for the requested card type."""

    def __init__(self, name: str, vendor: str):
        self.name = name
        self.vendor = vendor
        super().__init__(
            kind=FailureKind.UNKNOWN_VENDOR,
            message=f"Vendor '{vendor}' has no specification for card type '{name}'",
            status_code=404,
        )
