"""A sheet of named cells driven by ``set`` and ``get`` commands."""

import logging
from collections.abc import Iterable
from typing import TypeAlias

from ._messages import ErrorReply, OkReply, ValueReply
from ._runner import ExpressionRunner
from ._table import VariableTable
from ._value import Error, ErrorKind

logger = logging.getLogger(__name__)

SheetReply: TypeAlias = OkReply | ValueReply | ErrorReply


class Sheet:
    """Cells stored in a :class:`VariableTable`.

    ``set A1 <expr>`` evaluates the expression against the current cells and
    stores the result; ``get A1`` reports the stored value.

    Example:
        >>> sheet = Sheet()
        >>> sheet.handle_command("set A1 1")
        OkReply(type='ok')
        >>> sheet.handle_command("set B1 A1 + 2")
        OkReply(type='ok')
        >>> sheet.handle_command("get B1").value
        Number(value=3.0)

    """

    def __init__(self, table: VariableTable | None = None) -> None:
        self._table = table if table is not None else VariableTable()

    @property
    def table(self) -> VariableTable:
        return self._table

    def handle_command(self, command: str) -> SheetReply:
        """Run a single command and return its reply."""
        parts = command.split()
        match parts:
            case ["set", cell, *expr] if expr:
                return self.set_cell(cell, " ".join(expr))
            case ["get", cell]:
                return self.get_cell(cell)
            case _:
                logger.debug("Rejected command: %r", command)
                return ErrorReply(message="Invalid command format")

    def set_cell(self, cell: str, expression: str) -> SheetReply:
        """Evaluate ``expression`` and store the result in ``cell``.

        Errors are reported and leave the cell untouched.
        """
        logger.debug("Setting cell %s with expr: %s", cell, expression)
        result = ExpressionRunner(self._table).evaluate(expression)
        if isinstance(result, Error):
            logger.debug("Error in expression for %s: %s", cell, result)
            return ErrorReply(message=result.detail)

        logger.debug("Updating cell %s with value %s", cell, result)
        self._table.set(cell, result)
        return OkReply()

    def get_cell(self, cell: str) -> ValueReply:
        value = self._table.get(cell)
        if value is None:
            logger.debug("No value found for cell %s", cell)
            return ValueReply.of(Error(ErrorKind.UNDEFINED_VARIABLE, f"Cell {cell} not found"))
        return ValueReply.of(value)

    def run_script(self, lines: Iterable[str]) -> list[tuple[str, SheetReply]]:
        """Run each command line in order, skipping blanks and ``#`` comments."""
        results: list[tuple[str, SheetReply]] = []
        for raw_line in lines:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            results.append((line, self.handle_command(line)))
        return results
