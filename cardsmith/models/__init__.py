from cardsmith.models.failure import (
    ApiResponse,
    ArityMismatchError,
    CardsmithError,
    ConfigError,
    FailureDetail,
    FailureKind,
    InputFileNotFoundError,
    InvalidLayoutError,
    InvalidOptionError,
    InvalidRangeError,
    InvalidUnitError,
    OutcomeType,
    PresetError,
    RangeOutOfBoundsError,
    ResolutionError,
    UnknownPresetError,
    UnknownVendorError,
)
from cardsmith.models.option_value import OptionValue, PerCard, Scalar, classify, expand
from cardsmith.models.preset import PresetCatalog, PresetSpec, VendorSpec

__all__ = [
    # Failure envelope
    "ApiResponse",
    "FailureDetail",
    "FailureKind",
    "OutcomeType",
    # Exceptions
    "ArityMismatchError",
    "CardsmithError",
    "ConfigError",
    "InputFileNotFoundError",
    "InvalidLayoutError",
    "InvalidOptionError",
    "InvalidRangeError",
    "InvalidUnitError",
    "PresetError",
    "RangeOutOfBoundsError",
    "ResolutionError",
    "UnknownPresetError",
    "UnknownVendorError",
    # Option values
    "OptionValue",
    "PerCard",
    "Scalar",
    "classify",
    "expand",
    # Presets
    "PresetCatalog",
    "PresetSpec",
    "VendorSpec",
]
