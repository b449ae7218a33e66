"""Ingestion router — statement upload endpoints.

Authentication and persistence live outside this service; these endpoints
only run the ingestion engine on the uploaded bytes.
"""

import structlog
from fastapi import APIRouter, File, Form, UploadFile

from apps.api.domains.ingestion.schemas import ExcelUploadRequest, ParseResultOut
from apps.api.domains.ingestion.service import decode_excel_payload, parse_statement

router = APIRouter(prefix="/ingest", tags=["ingestion"])
logger = structlog.get_logger()


@router.post("/excel", response_model=ParseResultOut)
async def ingest_excel(request: ExcelUploadRequest):
    """Parse a base64-encoded statement into transactions."""
    logger.info("ingest_excel_started", filename=request.file_name)
    contents = decode_excel_payload(request.excel_base64)
    result = parse_statement(contents, request.file_name, password=request.password)
    return result.to_dict()


@router.post("/file", response_model=ParseResultOut)
async def ingest_file(
    file: UploadFile = File(...),
    password: str = Form(None),
):
    """Accept a multipart statement upload and parse it into transactions."""
    filename = file.filename or ""
    logger.info("ingest_file_started", filename=filename)
    contents = await file.read()
    result = parse_statement(contents, filename, password=password)
    return result.to_dict()
