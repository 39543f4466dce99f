"""Exception types for Super Calc.

- CalcError: base class for every recoverable failure
- EvaluationError: malformed expression or non-finite result
- InvalidInputError: non-numeric value, bill, or out-of-range option
- ConversionNotFoundError: unit pair missing from the catalog
- StorageError: persistence adapter failure
"""


class CalcError(Exception):
    """Base class for recoverable calculator errors."""


class EvaluationError(CalcError):
    """Raised when an expression cannot be evaluated."""


class InvalidInputError(CalcError):
    """Raised when a numeric input fails validation."""


class ConversionNotFoundError(CalcError):
    """Raised when no catalog entry matches a unit pair."""

    def __init__(self, from_unit: str, to_unit: str):
        super().__init__(f"Conversion type not found: {from_unit} -> {to_unit}")
        self.from_unit = from_unit
        self.to_unit = to_unit


class StorageError(CalcError):
    """Raised when the key-value store cannot be read or written."""
