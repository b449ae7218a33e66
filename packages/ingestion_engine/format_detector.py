"""Labels the likely source institution of a statement.

The label is informational only and never changes how the grid is parsed.
"""

from typing import List, Tuple

from .cells import Grid, cell_text

GENERIC_FORMAT = "generic"

# Order matters: the first identifier found wins
BANK_IDENTIFIERS: List[Tuple[str, str]] = [
    ("bbva", "BBVA"),
    ("intesa", "Intesa Sanpaolo"),
    ("unicredit", "UniCredit"),
    ("fineco", "Fineco"),
    ("n26", "N26"),
    ("revolut", "Revolut"),
    ("widiba", "Widiba"),
]

GENERIC_LABEL = "File Excel"


def detect_bank_format(grid: Grid, filename: str = "") -> str:
    """Return the first institution identifier found in the cells or filename."""
    lower_name = (filename or "").lower()
    flat_content = " ".join(cell_text(c) for row in grid for c in row).lower()

    for identifier, _ in BANK_IDENTIFIERS:
        if identifier in flat_content or identifier in lower_name:
            return identifier

    return GENERIC_FORMAT


def bank_label(bank_format: str) -> str:
    """Display name for a detected format."""
    for identifier, label in BANK_IDENTIFIERS:
        if identifier == bank_format:
            return label
    return GENERIC_LABEL
