"""
API handlers: read the raw request, call the decoder, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so services stay free of FastAPI/HTTP types.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import FAILURE_MESSAGE
from app.core.errors import MultipartDecodeError
from app.schemas.upload import UploadResult
from app.services.upload_decoder import decode_upload

logger = logging.getLogger(__name__)


def _failure_response(error: str) -> JSONResponse:
    payload = UploadResult(success=False, message=FAILURE_MESSAGE, error=error or "Unknown error")
    return JSONResponse(status_code=500, content=payload.to_payload())


async def handle_upload(request: Request) -> JSONResponse:
    """
    Decode a multipart upload and return its UploadResult.

    200 with the result on success. Any failure (malformed body, unreadable
    request) is logged and returned as 500 with success=false and an error
    string; no partial result is returned.
    """
    content_type = request.headers.get("content-type")
    try:
        body = await request.body()
        result = decode_upload(content_type, body)
    except MultipartDecodeError as e:
        logger.exception("[api:handle_upload] Upload error content_type=%r", content_type)
        return _failure_response(e.message)
    except Exception as e:
        logger.exception("[api:handle_upload] Unexpected upload error")
        return _failure_response(str(e))
    return JSONResponse(status_code=200, content=result.to_payload())
