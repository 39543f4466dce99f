"""Memory register (MC / MR / M+ / M-)."""

from .evaluator import format_result


class MemoryRegister:
    """A single accumulator, starting at zero."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def clear(self):
        """MC: reset to zero."""
        self.value = 0.0

    def recall(self) -> str:
        """MR: the stored value formatted for the display."""
        return format_result(self.value)

    def add(self, display: str) -> bool:
        """M+: add the displayed value. Non-numeric displays are ignored."""
        number = _parse_display(display)
        if number is None:
            return False
        self.value += number
        return True

    def subtract(self, display: str) -> bool:
        """M-: subtract the displayed value. Non-numeric displays are ignored."""
        number = _parse_display(display)
        if number is None:
            return False
        self.value -= number
        return True


def _parse_display(display: str):
    try:
        return float(display)
    except (TypeError, ValueError):
        return None
