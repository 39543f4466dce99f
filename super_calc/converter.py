"""Unit conversion over a fixed catalog.

Each catalog entry converts in one direction only:
to_value = from_value * multiplier.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Union

from .errors import ConversionNotFoundError, InvalidInputError
from .history import HistoryItem, HistoryKind

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"
CONVERSION_PRECISION = 2

# ASCII digits only, optional sign and exponent
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class ConversionType:
    """A single catalog entry."""

    from_unit: str
    to_unit: str
    label: str
    multiplier: float
    category: str


CONVERSION_TYPES = (
    ConversionType("m", "ft", "Meters to Feet", 3.28084, "Length"),
    ConversionType("km", "mi", "Kilometers to Miles", 0.621371, "Length"),
    ConversionType("kg", "lb", "Kilograms to Pounds", 2.20462, "Weight"),
    ConversionType("°C", "°F", "Celsius to Fahrenheit", 1.8, "Temperature"),
    ConversionType("L", "gal", "Liters to Gallons", 0.264172, "Volume"),
    ConversionType("km/h", "mph", "KM/H to MPH", 0.621371, "Speed"),
    ConversionType("cm²", "in²", "Sq Centimeters to Sq Inches", 0.155, "Area"),
    ConversionType("g", "oz", "Grams to Ounces", 0.035274, "Weight"),
)


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a successful conversion."""

    value_text: str
    conversion: ConversionType
    value: float

    @property
    def formatted(self) -> str:
        return f"{self.value:.{CONVERSION_PRECISION}f}"

    @property
    def display(self) -> str:
        """E.g. "10m = 32.81ft"."""
        return (
            f"{self.value_text}{self.conversion.from_unit} = "
            f"{self.formatted}{self.conversion.to_unit}"
        )

    def to_history_item(self) -> HistoryItem:
        return HistoryItem.create(
            HistoryKind.CONVERSION,
            result=self.display,
            category=self.conversion.category,
        )


def get_categories() -> List[str]:
    """Return "All" followed by each catalog category in first-seen order."""
    categories = [ALL_CATEGORIES]
    for conversion in CONVERSION_TYPES:
        if conversion.category not in categories:
            categories.append(conversion.category)
    return categories


def filter_conversions(category: str = ALL_CATEGORIES) -> List[ConversionType]:
    """List catalog entries in a category ("All" matches every entry)."""
    return [
        c for c in CONVERSION_TYPES
        if category == ALL_CATEGORIES or c.category == category
    ]


def find_conversion(from_unit: str, to_unit: str) -> ConversionType:
    """Look up the entry converting from_unit to to_unit.

    Raises:
        ConversionNotFoundError: If the exact pair is not in the catalog.
    """
    for conversion in CONVERSION_TYPES:
        if conversion.from_unit == from_unit and conversion.to_unit == to_unit:
            return conversion
    raise ConversionNotFoundError(from_unit, to_unit)


def parse_number(value: Union[str, int, float], what: str = "number") -> float:
    """Parse a finite float.

    Args:
        value: Text or number to parse.
        what: Name used in the error message.

    Raises:
        InvalidInputError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Please enter a valid {what}")
    if isinstance(value, str):
        value = value.strip()
        if not _DECIMAL.fullmatch(value):
            raise InvalidInputError(f"Please enter a valid {what}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Please enter a valid {what}") from None
    if not math.isfinite(number):
        raise InvalidInputError(f"Please enter a valid {what}")
    return number


def convert(value: Union[str, int, float], from_unit: str, to_unit: str) -> ConversionResult:
    """Convert a value between two catalog units.

    The input is validated before the catalog lookup.

    Args:
        value: Amount in from_unit.
        from_unit: Source unit label, e.g. "m".
        to_unit: Target unit label, e.g. "ft".

    Returns:
        ConversionResult with the value rounded to 2 decimals.

    Raises:
        InvalidInputError: If value is not a finite number.
        ConversionNotFoundError: If the unit pair is not in the catalog.
    """
    number = parse_number(value)
    conversion = find_conversion(from_unit, to_unit)
    result = round(number * conversion.multiplier, CONVERSION_PRECISION)
    value_text = value.strip() if isinstance(value, str) else _number_text(number)
    logger.debug("Converted %s with %s", value_text, conversion.label)
    return ConversionResult(value_text=value_text, conversion=conversion, value=result)


def _number_text(number: float) -> str:
    return str(int(number)) if number.is_integer() else str(number)
