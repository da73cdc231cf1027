"""Shared variable table guarded by a lock."""

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Self

from ._value import Error, Number, Value


class VariableTable:
    """Concurrency-safe mapping from variable name to ``Value``.

    Every access takes the lock for as long as it needs the underlying dict
    and no longer. Readers that want to do several lookups at once use
    :meth:`read`, which holds the lock for the duration of the ``with`` block.

    Example:
        >>> table = VariableTable.from_numbers({"x": 4.0})
        >>> with table.read() as view:
        ...     view["x"]
        Number(value=4.0)

    """

    def __init__(self, values: Mapping[str, Value] | None = None) -> None:
        self._values: dict[str, Value] = {}
        self._lock = threading.Lock()
        if values:
            self.update(values)

    @classmethod
    def from_numbers(cls, numbers: Mapping[str, float]) -> Self:
        """Build a table from plain floats."""
        return cls({name: Number(float(number)) for name, number in numbers.items()})

    @contextmanager
    def read(self) -> Iterator[Mapping[str, Value]]:
        """Hold the lock and yield a read-only view of the table.

        The view must not be used after the block exits.
        """
        with self._lock:
            yield MappingProxyType(self._values)

    def get(self, name: str) -> Value | None:
        with self._lock:
            return self._values.get(name)

    def set(self, name: str, value: Value) -> None:
        _check_value(value)
        with self._lock:
            self._values[name] = value

    def update(self, values: Mapping[str, Value]) -> None:
        """Store several values under a single lock acquisition."""
        for value in values.values():
            _check_value(value)
        with self._lock:
            self._values.update(values)

    def delete(self, name: str) -> None:
        with self._lock:
            self._values.pop(name, None)

    def snapshot(self) -> dict[str, Value]:
        """Return a plain copy of the current contents."""
        with self._lock:
            return dict(self._values)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __repr__(self) -> str:
        return f"VariableTable({self.snapshot()!r})"


def _check_value(value: object) -> None:
    if not isinstance(value, (Number, Error)):
        msg = f"Expected Number or Error, got {type(value).__name__}"
        raise TypeError(msg)
