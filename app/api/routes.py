"""
API route aggregator: register endpoints; no logic — only delegate to handlers.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.api.handlers import handle_upload
from app.core.config import UPLOAD_ENDPOINT
from app.schemas.upload import UploadResult

router = APIRouter()


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Upload backend running"}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Upload ---

@router.post(
    UPLOAD_ENDPOINT,
    response_model=UploadResult,
    response_model_exclude_none=True,
    tags=["upload"],
    summary="Receive a multipart upload and echo per-file metadata",
    description=(
        "Accepts multipart/form-data with file parts named file0..fileN-1 or generatedFile "
        "(native binary or data: URI string), plus totalFiles, uploadTime and optional source. "
        "Nothing is stored. Returns 500 with success=false if the body cannot be decoded."
    ),
    responses={500: {"model": UploadResult, "description": "Malformed multipart body."}},
)
async def upload_files(request: Request) -> JSONResponse:
    return await handle_upload(request)
