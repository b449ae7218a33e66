"""Pydantic schemas for the ingestion domain."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExcelUploadRequest(BaseModel):
    """Base64-encoded statement, as sent by the import dialog."""

    model_config = ConfigDict(populate_by_name=True)

    excel_base64: str = Field(default="", alias="excelBase64")
    file_name: str = Field(default="", alias="fileName")
    password: Optional[str] = None


class TransactionOut(BaseModel):
    """A parsed, categorized transaction ready for review."""

    date: str
    description: str
    amount: float = Field(gt=0)
    type: str  # "income" or "expense"
    category: str


class ParseResultOut(BaseModel):
    """Response from statement ingestion."""

    model_config = ConfigDict(populate_by_name=True)

    transactions: list[TransactionOut]
    source_label: str = Field(alias="sourceLabel")
    bank_format: str = Field(default="generic", alias="bankFormat")
    total_rows_scanned: int = Field(ge=0, alias="totalRowsScanned")
    parsed_count: int = Field(ge=0, alias="parsedCount")
