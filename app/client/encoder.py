"""
Upload encoding: assets + scalar metadata → one multipart/form-data body.

Responsibility: Name parts deterministically (file0..fileN-1, or generatedFile
for the synthetic blob), infer filenames and content types, and serialize the
body. No network here; the uploader hands the body to a transport.
"""

import base64
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import quote

from urllib3 import encode_multipart_formdata

from app.client.assets import Asset, text_asset
from app.core.config import (
    BLOB_CONTENT_TYPE,
    BLOB_FILENAME,
    BLOB_SOURCE,
    BLOB_TEXT,
    DEFAULT_IMAGE_TYPE,
    FILE_PART_PREFIX,
    GENERATED_FILE_PART,
    SOURCE_FIELD,
    TOTAL_FILES_FIELD,
    UPLOAD_TIME_FIELD,
)

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"\.(\w+)$", re.ASCII)


@dataclass(frozen=True)
class FileEntry:
    """One file part of a request: part name, asset and its resolved metadata."""

    part_name: str
    asset: Asset
    filename: str
    content_type: str
    as_data_uri: bool = False


@dataclass(frozen=True)
class UploadRequest:
    """The outbound unit. Fixed once built; total_files is the client's declared count."""

    files: tuple[FileEntry, ...]
    total_files: int
    upload_time: str
    source: str | None = None


@dataclass(frozen=True)
class EncodedBody:
    body: bytes
    content_type: str


def infer_filename(uri: str | None, index: int) -> str:
    """Last path segment of the uri, else image_<index>.jpg."""
    segment = uri.split("/")[-1] if uri else ""
    return segment or f"image_{index}.jpg"


def infer_content_type(filename: str) -> str:
    """image/<ext> for a trailing .<ext>, else image/jpeg."""
    match = _EXTENSION_RE.search(filename)
    return f"image/{match.group(1)}" if match else DEFAULT_IMAGE_TYPE


def iso_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2025-01-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_image_request(
    assets: list[Asset],
    total_files: int | None = None,
    source: str | None = None,
    upload_time: str | None = None,
) -> UploadRequest:
    """Numbered image upload: asset i becomes part file<i>."""
    entries = []
    for i, asset in enumerate(assets):
        filename = asset.filename or infer_filename(asset.uri, i)
        entries.append(
            FileEntry(
                part_name=f"{FILE_PART_PREFIX}{i}",
                asset=asset,
                filename=filename,
                content_type=asset.content_type or infer_content_type(filename),
            )
        )
    return UploadRequest(
        files=tuple(entries),
        total_files=len(assets) if total_files is None else total_files,
        upload_time=upload_time or iso_timestamp(),
        source=source,
    )


def build_blob_request(
    text: str = BLOB_TEXT,
    native_binary: bool = True,
    upload_time: str | None = None,
) -> UploadRequest:
    """
    Single synthetic text upload under the fixed part name generatedFile.

    native_binary=False is for hosts that cannot build binary parts: the same
    UTF-8 payload is sent as a data: URI string instead. The server reports
    identical metadata for both shapes.
    """
    entry = FileEntry(
        part_name=GENERATED_FILE_PART,
        asset=text_asset(text, BLOB_FILENAME, BLOB_CONTENT_TYPE),
        filename=BLOB_FILENAME,
        content_type=BLOB_CONTENT_TYPE,
        as_data_uri=not native_binary,
    )
    return UploadRequest(
        files=(entry,),
        total_files=1,
        upload_time=upload_time or iso_timestamp(),
        source=BLOB_SOURCE,
    )


def to_data_uri(content: bytes, content_type: str, filename: str | None = None) -> str:
    """data:<type>[;name=<filename>];base64,<payload>"""
    name_param = f";name={quote(filename, safe='')}" if filename else ""
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{content_type}{name_param};base64,{payload}"


def encode_request(request: UploadRequest, boundary: str | None = None) -> EncodedBody:
    """
    Serialize the request: file parts in order, then totalFiles, uploadTime and source.

    Raises:
        AssetReadError: If any asset's content cannot be read.
    """
    fields: list[tuple] = []
    for entry in request.files:
        content = entry.asset.read()
        if entry.as_data_uri:
            fields.append((entry.part_name, to_data_uri(content, entry.content_type, entry.filename)))
        else:
            fields.append((entry.part_name, (entry.filename, content, entry.content_type)))
    fields.append((TOTAL_FILES_FIELD, str(request.total_files)))
    fields.append((UPLOAD_TIME_FIELD, request.upload_time))
    if request.source is not None:
        fields.append((SOURCE_FIELD, request.source))

    body, content_type = encode_multipart_formdata(fields, boundary=boundary)
    logger.debug("[encoder:encode_request] parts=%d body_len=%d", len(fields), len(body))
    return EncodedBody(body=body, content_type=content_type)
