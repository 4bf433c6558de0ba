from dataclasses import dataclass
from typing import List, Optional

from sheetsight.data_utils import Number, Row

ASCENDING = "ascending"
DESCENDING = "descending"


@dataclass(frozen=True)
class SortDirective:
    column: str
    direction: str = ASCENDING

    @property
    def descending(self) -> bool:
        return self.direction == DESCENDING


def next_sort(current: Optional[SortDirective], column: str) -> SortDirective:
    """Same column flips the direction; a new column starts ascending."""
    if current is not None and current.column == column:
        flipped = ASCENDING if current.descending else DESCENDING
        return SortDirective(column, flipped)
    return SortDirective(column, ASCENDING)


def _sort_key(cell):
    # Numbers rank before text so mixed columns stay orderable.
    if isinstance(cell, Number):
        return (0, cell.value)
    return (1, cell.value)


def sort_rows(rows: List[Row], directive: Optional[SortDirective]) -> List[Row]:
    """
    Return a new, stably sorted list of the same row objects.
    Rows missing the column go last in both directions.
    """
    if directive is None:
        return list(rows)

    present = [row for row in rows if row.get(directive.column) is not None]
    missing = [row for row in rows if row.get(directive.column) is None]

    # sorted() stays stable with reverse=True
    ordered = sorted(present, key=lambda row: _sort_key(row[directive.column]),
                     reverse=directive.descending)
    return ordered + missing
