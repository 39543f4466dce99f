"""Arithmetic expression evaluation.

Input is sanitized down to digits, '.', '+', '-', '*', '/', '(' and ')',
tokenized, and evaluated by a small recursive-descent parser:

    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/') factor)*
    factor := ('+' | '-') factor | NUMBER | '(' expr ')'

Nesting through parentheses and unary signs is capped at MAX_NESTING_DEPTH.
Nothing is ever handed to eval/exec.
"""

import math
import re
from dataclasses import dataclass
from typing import List, Optional

from .errors import EvaluationError

EVALUATION_ERROR_DISPLAY = "Error"
RESULT_PRECISION = 8
MAX_NESTING_DEPTH = 100
# Magnitudes from here up render in exponent form, e.g. "1e+21"
EXPONENT_THRESHOLD = 1e21

_DISALLOWED = re.compile(r"[^0-9+\-*/().]")
_NUMBER = re.compile(r"\d+\.?\d*|\.\d+")


@dataclass(frozen=True)
class Token:
    """A lexical token."""

    kind: str  # "number" or "op"
    text: str
    position: int


def sanitize(text: str) -> str:
    """Strip every character the evaluator does not understand."""
    return _DISALLOWED.sub("", text or "")


def tokenize(text: str) -> List[Token]:
    """Split a sanitized expression into tokens.

    Raises:
        EvaluationError: On a malformed number such as "." or "1.2.3".
    """
    tokens = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char in "+-*/()":
            tokens.append(Token("op", char, pos))
            pos += 1
            continue

        match = _NUMBER.match(text, pos)
        if not match:
            raise EvaluationError(f"Unexpected '{char}' at position {pos}")
        end = match.end()
        # "1.2.3" lexes as "1.2" followed by ".3"; reject it here
        if end < len(text) and text[end] == ".":
            raise EvaluationError(f"Malformed number at position {pos}")
        tokens.append(Token("number", match.group(), pos))
        pos = end

    return tokens


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def parse(self) -> float:
        if not self.tokens:
            raise EvaluationError("Empty expression")
        value = self.expr()
        token = self.peek()
        if token is not None:
            raise EvaluationError(f"Unexpected '{token.text}' at position {token.position}")
        return value

    def expr(self) -> float:
        value = self.term()
        while self._at_op("+", "-"):
            op = self.advance().text
            right = self.term()
            value = value + right if op == "+" else value - right
        return value

    def term(self) -> float:
        value = self.factor()
        while self._at_op("*", "/"):
            op = self.advance().text
            right = self.factor()
            if op == "*":
                value = value * right
            else:
                if right == 0:
                    raise EvaluationError("Division by zero")
                value = value / right
        return value

    def factor(self) -> float:
        token = self.peek()
        if token is None:
            raise EvaluationError("Unexpected end of expression")

        if token.kind == "number":
            self.advance()
            return float(token.text)

        if token.text in ("+", "-"):
            self.advance()
            self._descend()
            value = self.factor()
            self.depth -= 1
            return -value if token.text == "-" else value

        if token.text == "(":
            self.advance()
            self._descend()
            value = self.expr()
            closing = self.peek()
            if closing is None or closing.text != ")":
                raise EvaluationError("Missing closing parenthesis")
            self.advance()
            self.depth -= 1
            return value

        raise EvaluationError(f"Unexpected '{token.text}' at position {token.position}")

    def _descend(self):
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise EvaluationError("Expression too deeply nested")

    def _at_op(self, *ops: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == "op" and token.text in ops


def compute(text: str) -> float:
    """Evaluate an expression to a finite float.

    Args:
        text: Raw user input; disallowed characters are dropped first.

    Returns:
        The numeric result.

    Raises:
        EvaluationError: Empty or malformed input, or a non-finite result.
    """
    value = _Parser(tokenize(sanitize(text))).parse()
    if not math.isfinite(value):
        raise EvaluationError("Result is not a finite number")
    return value


def format_result(value: float) -> str:
    """Render a result for display.

    Integral values have no decimal point; anything else is rounded to 8
    places with trailing zeros removed. Magnitudes of 1e21 and up use the
    shortest exponent form, e.g. "1e+300".
    """
    if abs(value) >= EXPONENT_THRESHOLD:
        return repr(float(value))
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.{RESULT_PRECISION}f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def evaluate(text: str) -> str:
    """Evaluate an expression and format the result.

    >>> evaluate("2+3*4")
    '14'
    >>> evaluate("1/3")
    '0.33333333'
    """
    return format_result(compute(text))
