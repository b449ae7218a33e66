"""
Statement Ingestion Engine

Turns arbitrary bank statement spreadsheets into signed, categorized transactions.
"""

__version__ = "0.1.0"

from .exceptions import StatementDecodeError
from .models import ParseResult, Transaction, TransactionType
from .parser import BankStatementParser, parse_bank_statement, parse_grid

__all__ = [
    "BankStatementParser",
    "parse_bank_statement",
    "parse_grid",
    "ParseResult",
    "Transaction",
    "TransactionType",
    "StatementDecodeError",
]
