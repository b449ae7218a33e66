"""Tests for the statement ingestion endpoints."""
import base64
import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from apps.api.core.config import settings
from apps.api.main import app

client = TestClient(app)

ROWS = [
    ["Fineco - estratto conto"],
    ["Data", "Descrizione", "Importo"],
    ["12/03/2024", "Pagamento Netflix mensile", "-12,99"],
    ["13/03/2024", "Stipendio", 1800],
    ["14/03/2024", "Commissione", 0],
]


def _xlsx_bytes(rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def statement_bytes():
    return _xlsx_bytes(ROWS)


def _post_excel(content: bytes, file_name: str = "movimenti.xlsx"):
    return client.post(
        "/api/v1/ingest/excel",
        json={
            "excelBase64": base64.b64encode(content).decode("ascii"),
            "fileName": file_name,
        },
    )


def test_ingest_excel_returns_parse_result(statement_bytes):
    response = _post_excel(statement_bytes)

    assert response.status_code == 200
    data = response.json()
    assert data["sourceLabel"] == "Fineco"
    assert data["totalRowsScanned"] == 5
    assert data["parsedCount"] == 2
    assert data["transactions"][0] == {
        "date": "2024-03-12",
        "description": "Pagamento Netflix mensile",
        "amount": 12.99,
        "type": "expense",
        "category": "abbonamenti",
    }
    assert data["transactions"][1]["type"] == "income"


def test_ingest_excel_is_deterministic(statement_bytes):
    first = _post_excel(statement_bytes).content
    second = _post_excel(statement_bytes).content
    assert first == second


def test_ingest_excel_accepts_data_url_prefix(statement_bytes):
    encoded = base64.b64encode(statement_bytes).decode("ascii")
    response = client.post(
        "/api/v1/ingest/excel",
        json={
            "excelBase64": f"data:application/vnd.ms-excel;base64,{encoded}",
            "fileName": "x.xlsx",
        },
    )
    assert response.status_code == 200
    assert response.json()["parsedCount"] == 2


def test_missing_file_returns_400():
    response = client.post("/api/v1/ingest/excel", json={"fileName": "x.xlsx"})

    assert response.status_code == 400
    assert response.json()["error"] == "File Excel mancante"


def test_invalid_base64_returns_422():
    response = client.post(
        "/api/v1/ingest/excel", json={"excelBase64": "***not base64***", "fileName": "x.xlsx"}
    )

    assert response.status_code == 422
    assert "error" in response.json()


def test_corrupt_workbook_returns_single_error():
    response = _post_excel(b"PK\x03\x04" + b"\x00" * 64)

    assert response.status_code == 422
    body = response.json()
    assert body["error"].startswith("Could not read Excel file")
    assert "transactions" not in body


def test_oversize_payload_returns_413(statement_bytes, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 16)

    response = _post_excel(statement_bytes)

    assert response.status_code == 413


def test_ingest_file_upload(statement_bytes):
    response = client.post(
        "/api/v1/ingest/file",
        files={
            "file": (
                "estratto.xlsx",
                io.BytesIO(statement_bytes),
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            )
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["parsedCount"] == 2
    assert all(t["amount"] > 0 for t in data["transactions"])


def test_ingest_file_upload_csv():
    csv_bytes = b"Data;Causale;Dare;Avere\n01/01/2024;Stipendio;;1500,00\n02/01/2024;Affitto;700,00;\n"

    response = client.post(
        "/api/v1/ingest/file",
        files={"file": ("movimenti.csv", io.BytesIO(csv_bytes), "text/csv")},
    )

    assert response.status_code == 200
    data = response.json()
    assert [(t["amount"], t["type"]) for t in data["transactions"]] == [
        (1500.0, "income"),
        (700.0, "expense"),
    ]
