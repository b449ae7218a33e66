"""
Bank Statement Parser - ingestion engine for unknown spreadsheet exports.

Pipeline: decode workbook -> detect institution -> locate header
-> map columns (or guess without header) -> normalize each row -> categorize.

The institution, column order, date format and decimal convention are all
inferred from the data. Parsing is best-effort: a bad row is defaulted or
skipped, never fatal. Only undecodable input raises StatementDecodeError.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from packages.categorization.rules import KeywordMatcher

from .cells import Grid
from .column_mapper import resolve_columns
from .excel_parser import parse_excel_grid
from .format_detector import bank_label, detect_bank_format
from .models import ParseResult
from .normalizer import normalize_row

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def parse_grid(
    grid: Grid,
    filename: str = "",
    matcher: Optional[KeywordMatcher] = None,
    today: Optional[date] = None,
) -> ParseResult:
    """
    Turn a decoded grid into a ParseResult.

    Args:
        grid: Rows of cells from the first sheet
        filename: Original file name, only used to label the institution
        matcher: Category matcher (default keyword table if omitted)
        today: Date used when a row has no readable date (UTC today if omitted)
    """
    matcher = matcher or KeywordMatcher()
    today = today or _utc_today()

    bank_format = detect_bank_format(grid, filename)
    logger.info(f"Detected bank format: {bank_format}")

    mapping, start_idx = resolve_columns(grid)

    transactions = []
    for i in range(start_idx, len(grid)):
        txn = normalize_row(grid[i] or [], mapping, matcher.predict, today)
        if txn is not None:
            transactions.append(txn)

    logger.info(f"Parsed transactions: {len(transactions)} of {len(grid)} rows")

    return ParseResult(
        transactions=transactions,
        source_label=bank_label(bank_format),
        bank_format=bank_format,
        total_rows_scanned=len(grid),
    )


class BankStatementParser:
    """
    Main parser class for bank statement spreadsheets.

    Stateless between calls: every parse() decodes and maps from scratch.
    """

    def __init__(
        self,
        file_content: bytes,
        filename: str = "",
        password: Optional[str] = None,
        matcher: Optional[KeywordMatcher] = None,
        today: Optional[date] = None,
    ):
        """
        Initialize parser.

        Args:
            file_content: Raw spreadsheet bytes
            filename: Original file name (labels the institution only)
            password: Password for encrypted workbooks
            matcher: Category matcher override
            today: Fallback date for rows without a readable date
        """
        self.file_content = file_content
        self.filename = filename or ""
        self.password = password
        self.matcher = matcher or KeywordMatcher()
        self.today = today

    def parse(self) -> ParseResult:
        """
        Parse the statement.

        Raises:
            StatementDecodeError: the bytes are not a readable spreadsheet.
        """
        logger.info(f"Parsing Excel file: {self.filename}")
        grid = parse_excel_grid(self.file_content, self.filename, password=self.password)
        return parse_grid(grid, self.filename, matcher=self.matcher, today=self.today)


def parse_bank_statement(
    file_content: bytes,
    filename: str = "",
    password: Optional[str] = None,
    today: Optional[date] = None,
) -> ParseResult:
    """
    Convenience function to parse a bank statement.

    Args:
        file_content: Raw spreadsheet bytes
        filename: Original file name
        password: Password for encrypted workbooks
        today: Fallback date for rows without a readable date

    Returns:
        ParseResult with transactions and counters
    """
    parser = BankStatementParser(
        file_content=file_content,
        filename=filename,
        password=password,
        today=today,
    )
    return parser.parse()
