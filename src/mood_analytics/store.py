"""
Contract of the spreadsheet-style store consumed by the analytics engine.

A store holds named sheets. Each sheet is an ordered list of text rows, the
first of which is the header row once provisioned. Row numbers are 1-based,
as in a spreadsheet.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

Row = List[str]


@dataclass(frozen=True)
class AppendResult:
    """Location of an appended row."""

    sheet: str
    row_number: int

    def to_dict(self) -> dict:
        return {"sheet": self.sheet, "rowNumber": self.row_number}


class Store(Protocol):
    """
    Tabular store collaborator.

    All methods raise StoreUnavailable when the backend cannot be reached
    within the configured timeout. read/append/update raise SchemaError for
    a sheet that has not been provisioned.
    """

    def append(self, table: str, row: Sequence[object]) -> AppendResult:
        ...

    def read(
        self,
        table: str,
        first_row: Optional[int] = None,
        last_row: Optional[int] = None,
    ) -> List[Row]:
        ...

    def update(self, table: str, row_number: int, row: Sequence[object]) -> None:
        ...

    def ensure_table(self, table: str) -> bool:
        ...

    def ensure_headers(self, table: str, columns: Sequence[str]) -> bool:
        ...

    def clear(self, table: str) -> None:
        ...
