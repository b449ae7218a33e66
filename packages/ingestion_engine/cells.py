"""Cell helpers shared by the header, column and row heuristics.

A Grid is a list of rows; each row is a list of cells holding text (str),
a number (int/float) or blank (None).
"""

import re
from typing import Any, List, Optional

Cell = Any
Row = List[Cell]
Grid = List[Row]

# D/M/Y with 1-2 digit day/month and a 2 or 4 digit year, not embedded in a longer digit run
DMY_PATTERN = re.compile(r"(?<!\d)(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4}|\d{2})(?!\d)")

CURRENCY_PATTERN = re.compile(r"[₹$€£¥\s]")


def is_number(cell: Cell) -> bool:
    """True for numeric cells. Booleans are not amounts."""
    return isinstance(cell, (int, float)) and not isinstance(cell, bool)


def cell_text(cell: Cell) -> str:
    """Render a cell as text the way a spreadsheet export would.

    Blank and falsy cells become "", integral floats drop their ".0".
    """
    if cell is None or cell == "" or cell is False:
        return ""
    if is_number(cell):
        if cell == 0:
            return ""
        if isinstance(cell, float) and cell.is_integer():
            return str(int(cell))
    return str(cell)


def cell_at(row: Row, idx: Optional[int]) -> Cell:
    """Return row[idx], or None when idx is unmapped or out of range."""
    if idx is None or idx < 0 or idx >= len(row):
        return None
    return row[idx]


def lower_cells(row: Row) -> List[str]:
    return [cell_text(c).lower().strip() for c in row]
