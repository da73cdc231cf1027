"""Expression runner: evaluates one ``<operand> <operator> <operand>`` string."""

import operator
import re
from collections.abc import Callable

from ._table import VariableTable
from ._value import Error, ErrorKind, Number, Value

_FLOAT = r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)"
_NAME = r"[^\W\d]\w*"

_LITERAL_RE = re.compile(_FLOAT, re.IGNORECASE)
_BINARY_RE = re.compile(
    rf"\s*(?P<left>{_FLOAT}|{_NAME})\s*(?P<op>[-+*/])\s*(?P<right>{_FLOAT}|{_NAME})\s*",
    re.IGNORECASE,
)

_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def parse_number(text: str) -> float | None:
    """Parse ``text`` as a float literal, or return None.

    Unlike ``float()``, surrounding whitespace and ``_`` separators are
    not accepted.
    """
    if _LITERAL_RE.fullmatch(text) is None:
        return None
    return float(text)


class ExpressionRunner:
    """Evaluate expressions against a shared :class:`VariableTable`.

    The runner only reads the table. It keeps no state of its own, so one
    instance can be shared between threads or created per call.
    """

    def __init__(self, table: VariableTable) -> None:
        self._table = table

    @property
    def table(self) -> VariableTable:
        return self._table

    def evaluate(self, expression: str) -> Value:
        """Evaluate a number literal or a single binary expression.

        Never raises for bad input: failures come back as :class:`Error`.

        Example:
            >>> ExpressionRunner(VariableTable()).evaluate("1 + 2")
            Number(value=3.0)

        """
        number = parse_number(expression)
        if number is not None:
            return Number(number)

        match = _BINARY_RE.fullmatch(expression)
        if match is None:
            return Error(ErrorKind.PARSE_FAILURE, f"Unsupported expression format: {expression}")

        left = self.resolve_operand(match["left"])
        if isinstance(left, Error):
            return left
        right = self.resolve_operand(match["right"])
        if isinstance(right, Error):
            return right

        op = match["op"]
        if op == "/" and right.value == 0:
            return Error(ErrorKind.DIVISION_BY_ZERO)
        return Number(_OPERATORS[op](left.value, right.value))

    def resolve_operand(self, token: str) -> Value:
        """Resolve a literal or a variable name to a value.

        The table lock is held only for the lookup itself.
        """
        number = parse_number(token)
        if number is not None:
            return Number(number)

        with self._table.read() as values:
            value = values.get(token)
        if value is None:
            return Error(ErrorKind.UNDEFINED_VARIABLE, f"Undefined variable: {token}")
        return value
