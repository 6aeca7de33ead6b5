"""
Upload decoding: tagged multipart parts → UploadResult.

Responsibility: Read the scalar metadata fields, collect file metadata in body
order, and apply the totalFiles policy. Pure: no storage, no forwarding, no
server-side timestamps. Called by the API layer; no HTTP or FastAPI here.
"""

import logging
import re

from app.core.config import (
    DEFAULT_FILE_TYPE,
    SOURCE_FIELD,
    SUCCESS_MESSAGE,
    TOTAL_FILES_FIELD,
    UNKNOWN_FILENAME,
    UPLOAD_TIME_FIELD,
)
from app.schemas.upload import FileInfo, UploadResult
from app.services.multipart_parser import DecodedPart, FilePart, ScalarPart, is_file_field, parse_multipart

logger = logging.getLogger(__name__)

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_declared_total(value: str | None) -> int | None:
    """
    Parse the client-declared totalFiles value.

    Accepts a leading integer (optional whitespace and sign), ignoring any
    trailing text, so "3" and "3 files" both give 3. Only decimal digits are
    read: "0x10" gives 0, not 16. Returns None when no
    integer can be read.
    """
    if value is None:
        return None
    match = _INT_PREFIX_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


def _first_scalar(parts: list[DecodedPart], name: str) -> str | None:
    for part in parts:
        if isinstance(part, ScalarPart) and part.name == name:
            return part.value
    return None


def summarize_parts(parts: list[DecodedPart]) -> UploadResult:
    """
    Build the success UploadResult from already-parsed parts.

    The declared totalFiles wins whenever it parses; the decoded count is only
    a fallback, and a mismatch between the two is not reported.
    """
    declared_total = _first_scalar(parts, TOTAL_FILES_FIELD)
    upload_time = _first_scalar(parts, UPLOAD_TIME_FIELD)
    source = _first_scalar(parts, SOURCE_FIELD)

    files = [
        FileInfo(
            name=part.filename or UNKNOWN_FILENAME,
            type=part.content_type or DEFAULT_FILE_TYPE,
            size=part.size,
        )
        for part in parts
        if isinstance(part, FilePart) and is_file_field(part.name)
    ]

    total = parse_declared_total(declared_total)
    if total is None:
        total = len(files)

    return UploadResult(
        success=True,
        message=SUCCESS_MESSAGE,
        upload_time=upload_time,
        total_files=total,
        files=files,
        source=source,
    )


def decode_upload(content_type_header: str | None, body: bytes) -> UploadResult:
    """
    Decode a multipart upload body into an UploadResult.

    Args:
        content_type_header: The request's Content-Type header.
        body: The complete request body.

    Returns:
        UploadResult with success=True, echoed uploadTime/source, totalFiles and files.

    Raises:
        MultipartDecodeError: If the body cannot be parsed (see parse_multipart).
    """
    parts = parse_multipart(content_type_header, body)
    result = summarize_parts(parts)
    logger.info(
        "[upload_decoder:decode_upload] Upload received: totalFiles=%s uploadTime=%s source=%s filesCount=%d files=%s",
        result.total_files,
        result.upload_time,
        result.source,
        len(result.files),
        [f.model_dump() for f in result.files],
    )
    return result
