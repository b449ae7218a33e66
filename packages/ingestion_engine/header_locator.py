import logging
from typing import Optional

from .cells import Grid, lower_cells

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 10

DATE_HEADER_KEYWORDS = ["data", "date", "valuta", "contabile", "operazione"]
DESC_HEADER_KEYWORDS = [
    "descrizione",
    "description",
    "causale",
    "beneficiario",
    "moviment",
    "dettagl",
    "operazione",
    "concetto",
]


def has_date_header(lower_row) -> bool:
    return any(kw in h for h in lower_row for kw in DATE_HEADER_KEYWORDS)


def has_desc_header(lower_row) -> bool:
    return any(kw in h for h in lower_row for kw in DESC_HEADER_KEYWORDS)


def locate_header(grid: Grid) -> Optional[int]:
    """
    Find the header row among the first rows of the grid.

    A row is a header when any cell mentions a date-ish or a description-ish
    keyword. Data starts on the row after it.

    Returns:
        Index of the header row, or None if no scanned row qualifies.
    """
    for i in range(min(HEADER_SCAN_ROWS, len(grid))):
        lower_row = lower_cells(grid[i] or [])
        logger.debug(f"Checking row {i} headers: {' | '.join(lower_row)}")

        if has_date_header(lower_row) or has_desc_header(lower_row):
            logger.info(f"Header found at row {i}")
            return i

    logger.info("No header row found in the first rows")
    return None
