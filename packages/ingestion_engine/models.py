from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Transaction:
    """A normalized statement row. amount is always a positive magnitude."""

    date: str  # YYYY-MM-DD
    description: str
    amount: float
    type: TransactionType
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
            "category": self.category,
        }


@dataclass
class ParseResult:
    """Transactions of one statement plus scan counters."""

    transactions: List[Transaction] = field(default_factory=list)
    source_label: str = ""
    bank_format: str = "generic"
    total_rows_scanned: int = 0

    @property
    def parsed_count(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON response shape (camelCase keys)."""
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "sourceLabel": self.source_label,
            "bankFormat": self.bank_format,
            "totalRowsScanned": self.total_rows_scanned,
            "parsedCount": self.parsed_count,
        }
