import io
import logging
import math
from datetime import date, datetime
from typing import Optional

import msoffcrypto
import numpy as np
import pandas as pd

from .cells import Cell, Grid, Row
from .exceptions import StatementDecodeError

logger = logging.getLogger(__name__)

# OLE2 Compound Document magic bytes — legacy .xls and encrypted Office files use this container
_OLE2_MAGIC = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"
_ZIP_MAGIC = b"PK\x03\x04"

_TEXT_ENCODINGS = ["utf-8", "latin-1", "cp1252"]


def _is_ole2(file_content: bytes) -> bool:
    """Check if file starts with the OLE2 magic bytes (legacy .xls or encryption wrapper)."""
    return file_content[:8] == _OLE2_MAGIC


def _is_zip(file_content: bytes) -> bool:
    return file_content[:4] == _ZIP_MAGIC


def _to_cell(value) -> Cell:
    """Convert a raw pandas value to a grid cell (text, number or blank)."""
    if value is None:
        return None
    if isinstance(value, (pd.Timestamp, datetime, date)):
        if pd.isna(value):
            return None
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value)).upper()
    if isinstance(value, (np.integer, int)):
        return int(value)
    if isinstance(value, (np.floating, float)):
        if math.isnan(value):
            return None
        return float(value)
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    return str(value)


def _frame_to_grid(df: pd.DataFrame) -> Grid:
    grid: Grid = []
    for values in df.itertuples(index=False, name=None):
        row: Row = [_to_cell(v) for v in values]
        # Ragged rows, as a sheet-to-array export would produce
        while row and (row[-1] is None or row[-1] == ""):
            row.pop()
        grid.append(row)
    return grid


def _decrypt(file_content: bytes, password: str) -> io.BytesIO:
    decrypted_workbook = io.BytesIO()
    try:
        with io.BytesIO(file_content) as f:
            office_file = msoffcrypto.OfficeFile(f)
            office_file.load_key(password=password)
            office_file.decrypt(decrypted_workbook)
    except Exception as e:
        msg = str(e).lower()
        if "password" in msg or "decrypt" in msg or "key" in msg:
            raise StatementDecodeError("Invalid password")
        raise StatementDecodeError(f"Failed to decrypt file: {e}")
    decrypted_workbook.seek(0)
    return decrypted_workbook


def _read_first_sheet(workbook: io.BytesIO, engine: str) -> pd.DataFrame:
    try:
        return pd.read_excel(
            workbook, sheet_name=0, header=None, dtype=object, engine=engine
        )
    except Exception as e:
        raise StatementDecodeError(f"Could not read Excel file: {e}")


def _read_delimited(file_content: bytes) -> pd.DataFrame:
    for encoding in _TEXT_ENCODINGS:
        try:
            text = file_content.decode(encoding)
        except UnicodeDecodeError:
            continue
        try:
            return pd.read_csv(
                io.StringIO(text),
                sep=None,
                engine="python",
                header=None,
                dtype=object,
                keep_default_na=False,
                skip_blank_lines=False,
            )
        except Exception as e:
            raise StatementDecodeError(f"Could not read delimited file: {e}")

    raise StatementDecodeError("Could not decode file with any known encoding")


def _is_encrypted(file_content: bytes) -> bool:
    try:
        with io.BytesIO(file_content) as f:
            return msoffcrypto.OfficeFile(f).is_encrypted()
    except Exception:
        # Not an Office container msoffcrypto understands; let the reader decide
        return False


def parse_excel_grid(
    file_content: bytes, filename: str = "", password: Optional[str] = None
) -> Grid:
    """
    Decodes spreadsheet bytes into a Grid of the first sheet.

    Supports .xlsx (ZIP), legacy .xls and password-protected workbooks (OLE2),
    and delimited text exports. Cells keep their native type: numbers stay
    numbers, dates become ISO text, empty cells become None.

    Raises:
        StatementDecodeError: the bytes cannot be decoded into a sheet.
    """
    if not file_content:
        raise StatementDecodeError("File is empty")

    if _is_ole2(file_content):
        # Either a legacy .xls or an encrypted .xlsx
        if _is_encrypted(file_content):
            if not password:
                raise StatementDecodeError("Password required")
            df = _read_first_sheet(_decrypt(file_content, password), engine="openpyxl")
        else:
            df = _read_first_sheet(io.BytesIO(file_content), engine="xlrd")
    elif _is_zip(file_content):
        df = _read_first_sheet(io.BytesIO(file_content), engine="openpyxl")
    else:
        logger.debug(f"No workbook signature in {filename or 'upload'}, reading as text")
        df = _read_delimited(file_content)

    grid = _frame_to_grid(df)
    logger.info(f"Workbook decoded, rows: {len(grid)}")
    return grid
