"""Ingestion service — decodes the upload envelope and runs the engine.

Translates the engine's single fatal error into StatementParseError so the
API reports it as a Problem Details response.
"""

import base64
import binascii
from typing import Optional

import structlog

from apps.api.core.config import settings
from apps.api.core.errors import PayloadTooLargeError, StatementParseError, ValidationError
from packages.ingestion_engine import ParseResult, StatementDecodeError, parse_bank_statement

logger = structlog.get_logger()


def decode_excel_payload(excel_base64: str) -> bytes:
    """Decode the base64 body field into workbook bytes.

    Accepts an optional data-URL prefix ("data:...;base64,").
    """
    if not excel_base64:
        raise ValidationError("File Excel mancante")

    payload = excel_base64.split(",", 1)[1] if excel_base64.startswith("data:") else excel_base64
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise StatementParseError(f"Invalid base64 payload: {e}")


def parse_statement(
    contents: bytes, filename: str = "", password: Optional[str] = None
) -> ParseResult:
    """Run the ingestion engine on raw statement bytes."""
    if len(contents) > settings.MAX_UPLOAD_BYTES:
        raise PayloadTooLargeError(
            f"File too large (max {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB)"
        )

    try:
        result = parse_bank_statement(contents, filename, password=password)
    except StatementDecodeError as e:
        logger.error("excel_parse_failed", error=str(e), filename=filename)
        raise StatementParseError(str(e))

    logger.info(
        "ingest_complete",
        filename=filename,
        bank=result.bank_format,
        total_rows=result.total_rows_scanned,
        parsed=result.parsed_count,
    )
    return result
