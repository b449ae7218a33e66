import io
from datetime import date

import pytest
from openpyxl import Workbook


@pytest.fixture
def today():
    return date(2025, 1, 31)


@pytest.fixture
def make_xlsx():
    """Build .xlsx bytes from a list of rows (first sheet)."""

    def _make(rows, title="Movimenti"):
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for row in rows:
            ws.append(row)
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    return _make
