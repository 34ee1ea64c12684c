"""
Client-side staging of batch rows before a single commit.

A ``PendingBatch`` is the list an operator fills in on a form: rows can be
added, corrected or dropped by position, and the whole list is then handed to
one of the batch operations. The list is only cleared after that call returns,
so a rejected batch keeps its rows for correction.
"""

from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

RowT = TypeVar("RowT")
ResultT = TypeVar("ResultT")


class PendingBatch(Generic[RowT]):
    def __init__(self, rows: list[RowT] | None = None):
        self._rows: list[RowT] = list(rows or [])

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[RowT]:
        return iter(list(self._rows))

    def __getitem__(self, index: int) -> RowT:
        return self._rows[index]

    @property
    def rows(self) -> list[RowT]:
        return list(self._rows)

    def add(self, row: RowT) -> int:
        self._rows.append(row)
        return len(self._rows) - 1

    def edit(self, index: int, row: RowT) -> RowT:
        previous = self._rows[index]
        self._rows[index] = row
        return previous

    def remove(self, index: int) -> RowT:
        return self._rows.pop(index)

    def clear(self) -> None:
        self._rows.clear()

    def submit(self, apply_fn: Callable[[list[RowT]], ResultT]) -> ResultT:
        if not self._rows:
            raise ValueError("Cannot submit an empty batch")
        result = apply_fn(list(self._rows))
        self.clear()
        return result
