"""Super Calc - calculator, unit converter and tip splitter.

Components:
- Expression evaluation (recursive descent, no eval)
- Unit conversion over a fixed catalog
- Tip and bill splitting
- Persisted, searchable calculation history
- Memory register and theme preference
"""

__version__ = "1.0.0"

from .evaluator import evaluate, format_result
from .converter import (
    ConversionType,
    ConversionResult,
    CONVERSION_TYPES,
    convert,
    filter_conversions,
    get_categories,
)
from .tip_calculator import TipResult, calculate_tip
from .history import (
    HistoryItem,
    HistoryKind,
    HistoryManager,
    load_history_manager,
)
from .errors import (
    CalcError,
    EvaluationError,
    InvalidInputError,
    ConversionNotFoundError,
    StorageError,
)

__all__ = [
    # Evaluation
    "evaluate",
    "format_result",
    # Conversion
    "ConversionType",
    "ConversionResult",
    "CONVERSION_TYPES",
    "convert",
    "filter_conversions",
    "get_categories",
    # Tip
    "TipResult",
    "calculate_tip",
    # History
    "HistoryItem",
    "HistoryKind",
    "HistoryManager",
    "load_history_manager",
    # Errors
    "CalcError",
    "EvaluationError",
    "InvalidInputError",
    "ConversionNotFoundError",
    "StorageError",
]
