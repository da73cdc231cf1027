"""Values produced by evaluating an expression.

A value is either a ``Number`` or an ``Error``. Errors are ordinary values,
so evaluation never has to raise to report a bad expression.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self, TypeAlias


class ErrorKind(StrEnum):
    """Kinds of evaluation error, each member carrying its own docstring."""

    def __new__(cls, value: str, doc: str = "") -> Self:
        """Create a new member with a docstring."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__doc__ = doc
        return obj

    PARSE_FAILURE = "parse_failure", "Neither a number nor a single binary expression"
    UNDEFINED_VARIABLE = "undefined_variable", "An operand names a variable absent from the table"
    DIVISION_BY_ZERO = "division_by_zero", "Division with a zero right operand"


_DEFAULT_DETAILS = {
    ErrorKind.PARSE_FAILURE: "Unsupported expression format",
    ErrorKind.UNDEFINED_VARIABLE: "Undefined variable",
    ErrorKind.DIVISION_BY_ZERO: "Division by zero",
}


@dataclass(frozen=True, slots=True)
class Number:
    """A successfully computed number."""

    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True, slots=True)
class Error:
    """A failed evaluation.

    Attributes:
        kind: What went wrong.
        detail: Human-readable message. Not part of equality, so
            ``Error(ErrorKind.PARSE_FAILURE)`` matches any parse failure.

    """

    kind: ErrorKind
    detail: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.detail:
            # frozen dataclass: bypass __setattr__
            object.__setattr__(self, "detail", _DEFAULT_DETAILS[self.kind])

    def __str__(self) -> str:
        return self.detail


Value: TypeAlias = Number | Error


def is_error(value: Value) -> bool:
    """Check whether a value is an evaluation error."""
    return isinstance(value, Error)
