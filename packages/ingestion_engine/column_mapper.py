"""
Column Role Mapper - resolves column indices to semantic roles.

The mapping is built by composing small pure steps. Each step takes the
previous ColumnMapping and returns an updated copy, so precedence between
the heuristics is the order in which the steps run:

    try_exact_header_match -> try_keyword_fallback -> apply_collision_rule
    -> apply_description_fallback -> apply_amount_fallback

When no header row exists, apply_no_header_fallback replaces the header
steps and also decides where the data starts.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .cells import (
    CURRENCY_PATTERN,
    DMY_PATTERN,
    Grid,
    Row,
    cell_text,
    is_number,
    lower_cells,
)
from .header_locator import locate_header

logger = logging.getLogger(__name__)

NO_HEADER_SCAN_ROWS = 5
SERIAL_DATE_MIN = 30000
SERIAL_DATE_MAX = 50000

DEFAULT_DATE_COLUMN = 0
DEFAULT_DESCRIPTION_COLUMN = 1
DEFAULT_AMOUNT_COLUMN = 2

_MONEY_PATTERN = re.compile(r"^-?[\d.,]+$")


@dataclass(frozen=True)
class ColumnMapping:
    """Column index per semantic role; None means unmapped."""

    date: Optional[int] = None
    date_valuta: Optional[int] = None
    description: Optional[int] = None
    concept_part: Optional[int] = None
    movement_part: Optional[int] = None
    amount: Optional[int] = None
    credit: Optional[int] = None
    debit: Optional[int] = None

    @property
    def is_split(self) -> bool:
        """True when direction comes from separate credit/debit columns."""
        return self.credit is not None or self.debit is not None

    @property
    def has_composite_description(self) -> bool:
        return self.concept_part is not None or self.movement_part is not None


def _find(header: List[str], predicate: Callable[[str], bool]) -> Optional[int]:
    for idx, h in enumerate(header):
        if predicate(h):
            return idx
    return None


def try_exact_header_match(mapping: ColumnMapping, header: List[str]) -> ColumnMapping:
    """Resolve the roles that are identified by an exact header name.

    Prefers the posting date ("data", "date", "...contabile") over the value
    date ("valuta"), which is kept aside as date_valuta.
    """
    date = _find(header, lambda h: h in ("data", "date") or "contabile" in h)
    date_valuta = _find(header, lambda h: "valuta" in h)
    concept_part = _find(header, lambda h: h in ("concetto", "concept"))
    movement_part = _find(header, lambda h: h in ("movimento", "movement"))
    amount = _find(header, lambda h: h in ("importo", "amount", "importe") or "euro" in h)

    return replace(
        mapping,
        date=date,
        date_valuta=date_valuta,
        concept_part=concept_part,
        movement_part=movement_part,
        amount=amount,
    )


def try_keyword_fallback(mapping: ColumnMapping, header: List[str]) -> ColumnMapping:
    """Resolve the remaining roles by keyword containment."""
    date = mapping.date
    if date is None:
        date = next(
            (
                idx
                for idx, h in enumerate(header)
                if ("data" in h or "date" in h) and idx != mapping.date_valuta
            ),
            None,
        )
    if date is None:
        date = mapping.date_valuta

    description = _find(
        header,
        lambda h: any(
            kw in h
            for kw in ("descrizione", "description", "causale", "beneficiario", "dettagl")
        ),
    )
    if description is None and mapping.concept_part is not None:
        description = mapping.concept_part

    credit = _find(
        header,
        lambda h: any(kw in h for kw in ("avere", "credit", "entrat", "accredit")) or h == "+",
    )
    debit = _find(
        header,
        lambda h: any(kw in h for kw in ("dare", "debit", "uscit", "addebit")) or h == "-",
    )

    return replace(mapping, date=date, description=description, credit=credit, debit=debit)


def apply_collision_rule(mapping: ColumnMapping) -> ColumnMapping:
    """Unmap credit and debit when both resolved to the same column."""
    if mapping.credit is not None and mapping.credit == mapping.debit:
        logger.info("Credit and debit are same column, resetting")
        return replace(mapping, credit=None, debit=None)
    return mapping


def apply_description_fallback(mapping: ColumnMapping, width: int) -> ColumnMapping:
    """Use the column after the date when no description column was found."""
    if mapping.description is not None or mapping.date is None:
        return mapping
    if mapping.date + 1 < width:
        logger.info(f"Using fallback description column: {mapping.date + 1}")
        return replace(mapping, description=mapping.date + 1)
    return mapping


def _looks_like_date(cell) -> bool:
    if is_number(cell):
        return SERIAL_DATE_MIN <= cell <= SERIAL_DATE_MAX
    if isinstance(cell, str):
        return DMY_PATTERN.search(cell) is not None
    return False


def apply_no_header_fallback(
    mapping: ColumnMapping, grid: Grid
) -> Tuple[ColumnMapping, int]:
    """
    Guess the date column from the data itself when no header row exists.

    The first cell among the first rows that looks like a serial date or a
    D/M/Y string marks the date column, and its row is the first data row.
    The description is assumed to follow the date.

    Returns:
        The updated mapping and the index of the first data row.
    """
    for i in range(min(NO_HEADER_SCAN_ROWS, len(grid))):
        row = grid[i] or []
        for j, cell in enumerate(row):
            if _looks_like_date(cell):
                logger.info(f"Auto-detected date column {j} at row {i}")
                return replace(mapping, date=j, description=j + 1), i

    logger.info("No date-like cell found, using default columns")
    return (
        replace(
            mapping,
            date=DEFAULT_DATE_COLUMN,
            description=DEFAULT_DESCRIPTION_COLUMN,
            amount=DEFAULT_AMOUNT_COLUMN,
        ),
        0,
    )


def _looks_like_money(cell) -> bool:
    if is_number(cell):
        return True
    return bool(_MONEY_PATTERN.match(CURRENCY_PATTERN.sub("", cell_text(cell))))


def apply_amount_fallback(mapping: ColumnMapping, sample_row: Row) -> ColumnMapping:
    """Pick the first money-looking column of the first data row as the amount."""
    if mapping.amount is not None or mapping.is_split:
        return mapping

    for j, cell in enumerate(sample_row):
        if j == mapping.date or j == mapping.description:
            continue
        if _looks_like_money(cell):
            logger.info(f"Auto-detected amount column at {j}")
            return replace(mapping, amount=j)

    return replace(mapping, amount=DEFAULT_AMOUNT_COLUMN)


def map_header_columns(header_row: Row) -> ColumnMapping:
    """Resolve roles from a header row (amount fallback not applied)."""
    header = lower_cells(header_row)
    mapping = try_exact_header_match(ColumnMapping(), header)
    mapping = try_keyword_fallback(mapping, header)
    mapping = apply_collision_rule(mapping)
    return apply_description_fallback(mapping, len(header))


def resolve_columns(grid: Grid) -> Tuple[ColumnMapping, int]:
    """
    Locate the header and map every column role.

    Returns:
        The final mapping and the index of the first data row.
    """
    header_idx = locate_header(grid)

    if header_idx is not None:
        mapping = map_header_columns(grid[header_idx] or [])
        start_idx = header_idx + 1
    else:
        mapping, start_idx = apply_no_header_fallback(ColumnMapping(), grid)

    sample_row = grid[start_idx] if start_idx < len(grid) else []
    mapping = apply_amount_fallback(mapping, sample_row or [])

    logger.info(f"Parsing from row {start_idx} with columns: {mapping}")
    return mapping, start_idx
