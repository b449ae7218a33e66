"""
Row Normalizer - turns one grid row into a Transaction.

Decoding is best-effort: day/month order, the decimal separator and the
spreadsheet serial epoch cannot be known for certain from text alone.
Unreadable dates fall back to today, unreadable amounts to zero, and a
missing description to a placeholder. Amounts are floats and should not be
treated as exact for financial totals.
"""

import math
import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Tuple

from .cells import CURRENCY_PATTERN, DMY_PATTERN, Row, cell_at, cell_text, is_number
from .column_mapper import ColumnMapping
from .models import Transaction, TransactionType

ISO_DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_DECIMAL_COMMA = re.compile(r",\d{2}$")
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_NUMERIC_TEXT = re.compile(r"^\d+[,.]?\d*$")

# Two-digit years above the pivot belong to the 1900s
YEAR_PIVOT = 50

# Serial dates count days from 1899-12-30; 25569 is the serial of 1970-01-01
SERIAL_UNIX_OFFSET = 25569
UNIX_EPOCH = datetime(1970, 1, 1)

MIN_MAGNITUDE = 0.01
MAX_DESCRIPTION_LENGTH = 200
PLACEHOLDER_DESCRIPTION = "Transazione"


def parse_date(value, today: date) -> str:
    """
    Decode a date cell to YYYY-MM-DD.

    Tries D/M/Y text (2-digit years pivot at 50), then ISO text, then a
    spreadsheet serial number. Anything else yields today's date.
    """
    if not value:
        return today.isoformat()

    if isinstance(value, str):
        match = DMY_PATTERN.search(value)
        if match:
            day = match.group(1).zfill(2)
            month = match.group(2).zfill(2)
            year = match.group(3)
            if len(year) == 2:
                year = f"19{year}" if int(year) > YEAR_PIVOT else f"20{year}"
            return f"{year}-{month}-{day}"

        iso_match = ISO_DATE_PATTERN.search(value)
        if iso_match:
            return iso_match.group(0)

    if is_number(value):
        try:
            return (UNIX_EPOCH + timedelta(days=value - SERIAL_UNIX_OFFSET)).date().isoformat()
        except (OverflowError, ValueError):
            pass

    return today.isoformat()


def parse_amount(value) -> float:
    """Parse amount, handling currency symbols and both decimal conventions."""
    if not value:
        return 0.0

    if is_number(value):
        return float(value) if math.isfinite(value) else 0.0

    cleaned = CURRENCY_PATTERN.sub("", str(value)).strip()

    # Comma followed by exactly two trailing digits is a decimal comma (European format)
    if _DECIMAL_COMMA.search(cleaned):
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)
    else:
        cleaned = cleaned.replace(",", "")

    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return 0.0
    amount = float(match.group(0))
    return amount if math.isfinite(amount) else 0.0


def build_description(row: Row, mapping: ColumnMapping) -> str:
    """Assemble the description: composite parts, mapped column, first text cell, placeholder."""
    description = ""

    # Concept + movement layout (BBVA)
    if mapping.has_composite_description:
        concept = cell_text(cell_at(row, mapping.concept_part)).strip()
        movement = cell_text(cell_at(row, mapping.movement_part)).strip()
        if concept and movement:
            description = f"{concept} - {movement}"
        else:
            description = concept or movement

    if not description and mapping.description is not None:
        description = cell_text(cell_at(row, mapping.description)).strip()

    if not description:
        skip = {mapping.date, mapping.amount, mapping.credit, mapping.debit}
        for j, cell in enumerate(row):
            if j in skip:
                continue
            text = cell_text(cell).strip()
            if len(text) > 3 and not _NUMERIC_TEXT.match(text):
                description = text
                break

    return description or PLACEHOLDER_DESCRIPTION


def resolve_amount(
    row: Row, mapping: ColumnMapping
) -> Optional[Tuple[float, TransactionType]]:
    """
    Resolve the magnitude and direction of a row.

    Returns:
        (amount, type) with amount >= 0.01, or None when the row carries no
        usable amount and must be skipped.
    """
    if mapping.is_split:
        credit = parse_amount(cell_at(row, mapping.credit))
        debit = parse_amount(cell_at(row, mapping.debit))

        if abs(credit) > MIN_MAGNITUDE:
            amount, txn_type = abs(credit), TransactionType.INCOME
        elif abs(debit) > MIN_MAGNITUDE:
            amount, txn_type = abs(debit), TransactionType.EXPENSE
        else:
            return None
    elif mapping.amount is not None:
        raw_amount = parse_amount(cell_at(row, mapping.amount))
        amount = abs(raw_amount)
        txn_type = TransactionType.EXPENSE if raw_amount < 0 else TransactionType.INCOME
    else:
        return None

    if amount < MIN_MAGNITUDE:
        return None
    return amount, txn_type


def normalize_row(
    row: Row,
    mapping: ColumnMapping,
    categorize: Callable[[str], str],
    today: date,
) -> Optional[Transaction]:
    """Build a Transaction from a data row, or None if the row is skipped."""
    if len(row) < 2:
        return None

    resolved = resolve_amount(row, mapping)
    if resolved is None:
        return None
    amount, txn_type = resolved

    date_idx = mapping.date if mapping.date is not None else 0
    description = build_description(row, mapping)

    return Transaction(
        date=parse_date(cell_at(row, date_idx), today),
        description=description[:MAX_DESCRIPTION_LENGTH],
        amount=amount,
        type=txn_type,
        category=categorize(description),
    )
