"""Key-by-key calculator state.

CalculatorSession mirrors a calculator keypad: digits and operators build up
the input, "=" evaluates, "C" clears, and MC / MR / M+ / M- drive the memory
register. The session owns its state explicitly; evaluation and history are
delegated to the evaluator and the HistoryManager.
"""

import logging
from typing import Optional

from . import evaluator
from .errors import EvaluationError
from .history import HistoryItem, HistoryKind, HistoryManager
from .memory import MemoryRegister

logger = logging.getLogger(__name__)

OPERATORS = ("/", "*", "-", "+")
MEMORY_KEYS = ("MC", "MR", "M+", "M-")
CALCULATION_CATEGORY = "Basic"


class CalculatorSession:
    """Calculator display state plus memory register."""

    def __init__(self, history: HistoryManager, memory: Optional[MemoryRegister] = None):
        self.history = history
        self.memory = memory or MemoryRegister()
        self.input = ""
        self.result = ""
        self.last_operation = ""

    @property
    def display_value(self) -> str:
        """What M+ / M- read: the result if there is one, else the input."""
        return self.result or self.input

    def clear(self):
        self.input = ""
        self.result = ""

    def type_key(self, key: str):
        """Append a key to the input.

        After a result, a non-operator key starts a fresh input.
        """
        if self.result and key not in OPERATORS:
            self.input = key
            self.result = ""
        else:
            self.input += key
        self.last_operation = key

    def memory_key(self, key: str):
        if key == "MC":
            self.memory.clear()
        elif key == "MR":
            self.input = self.memory.recall()
            self.result = ""
        elif key == "M+":
            self.memory.add(self.display_value)
        elif key == "M-":
            self.memory.subtract(self.display_value)
        else:
            raise ValueError(f"Unknown memory key: {key}")

    async def evaluate(self) -> str:
        """Evaluate the input and record it in history.

        Raises:
            EvaluationError: The result shows the error sentinel and nothing
                is recorded.
        """
        try:
            formatted = evaluator.evaluate(self.input)
        except EvaluationError as e:
            logger.debug("Evaluation failed for %r: %s", self.input, e)
            self.result = evaluator.EVALUATION_ERROR_DISPLAY
            raise

        self.result = formatted
        await self.history.append(
            HistoryItem.create(
                HistoryKind.CALCULATION,
                result=formatted,
                expression=self.input,
                category=CALCULATION_CATEGORY,
            )
        )
        return formatted

    async def press(self, key: str) -> str:
        """Handle one keypad press and return the text to display."""
        if key == "C":
            self.clear()
        elif key == "=":
            await self.evaluate()
        elif key in MEMORY_KEYS:
            self.memory_key(key)
        else:
            self.type_key(key)
        return self.result or self.input
