"""
Multipart wire parsing: raw multipart/form-data body → tagged parts.

Responsibility: Frame the body with python-multipart and normalize every part
into one of two explicit variants, ScalarPart or FilePart. A file may arrive
either as a native binary part (filename in Content-Disposition) or as a plain
value holding a data: URI (file fields only); both become FilePart here so
the decoder never has to inspect raw values. No HTTP or FastAPI here.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Literal
from urllib.parse import unquote, unquote_to_bytes

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from app.core.config import FILE_PART_PREFIX, GENERATED_FILE_PART
from app.core.errors import MultipartDecodeError

logger = logging.getLogger(__name__)

MULTIPART_FORM_DATA = b"multipart/form-data"

# WHATWG form encoding escapes these in Content-Disposition name/filename values
_FORM_PARAM_ESCAPES = {"%22": '"', "%0D": "\r", "%0A": "\n"}
_FORM_PARAM_ESCAPE_RE = re.compile("|".join(_FORM_PARAM_ESCAPES), re.IGNORECASE)

# data:[<mediatype>][;param=value]*[;base64],<data>
_DATA_URI_RE = re.compile(
    r"^data:(?P<mediatype>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w.+-]+=[^;,]*)*)(?P<base64>;base64)?,(?P<data>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class ScalarPart:
    """A named text field."""

    name: str
    value: str


@dataclass(frozen=True)
class FilePart:
    """A named file payload, normalized from either wire shape."""

    name: str
    filename: str | None
    content_type: str | None
    size: int
    encoding: Literal["binary", "data-uri"] = "binary"


DecodedPart = ScalarPart | FilePart


@dataclass
class _RawPart:
    headers: dict[str, bytes]
    data: bytearray


def boundary_from_content_type(content_type_header: str | None) -> bytes:
    """
    Return the boundary of a multipart/form-data Content-Type header.

    Raises:
        MultipartDecodeError: If the media type is not multipart/form-data or has no boundary.
    """
    if not content_type_header or not content_type_header.strip():
        raise MultipartDecodeError("Missing Content-Type header")
    media_type, options = parse_options_header(content_type_header)
    if media_type.lower() != MULTIPART_FORM_DATA:
        raise MultipartDecodeError(
            f"Expected multipart/form-data, got {media_type.decode('latin-1') or 'no media type'!r}"
        )
    boundary = options.get(b"boundary")
    if not boundary:
        raise MultipartDecodeError("Missing boundary in multipart body")
    return boundary


def _split_parts(boundary: bytes, body: bytes) -> list[_RawPart]:
    """Run the streaming parser over the whole body and collect raw parts in order."""
    parts: list[_RawPart] = []
    header_field = bytearray()
    header_value = bytearray()
    current: _RawPart | None = None
    finished = False

    def on_part_begin() -> None:
        nonlocal current
        current = _RawPart(headers={}, data=bytearray())

    def on_header_field(data: bytes, start: int, end: int) -> None:
        header_field.extend(data[start:end])

    def on_header_value(data: bytes, start: int, end: int) -> None:
        header_value.extend(data[start:end])

    def on_header_end() -> None:
        name = bytes(header_field).decode("latin-1").strip().lower()
        current.headers[name] = bytes(header_value).strip()
        header_field.clear()
        header_value.clear()

    def on_part_data(data: bytes, start: int, end: int) -> None:
        current.data.extend(data[start:end])

    def on_part_end() -> None:
        parts.append(current)

    def on_end() -> None:
        nonlocal finished
        finished = True

    callbacks = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_end": on_end,
    }
    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as e:
        raise MultipartDecodeError(f"Malformed multipart body: {e}") from e
    if not finished:
        raise MultipartDecodeError("Multipart body ended before the closing boundary")
    return parts


def _parse_data_uri(name: str, value: str) -> FilePart | None:
    """Return a FilePart for a data: URI value, or None if the value is not one."""
    match = _DATA_URI_RE.match(value.strip())
    if not match:
        return None
    params: dict[str, str] = {}
    for item in (match.group("params") or "").split(";"):
        if "=" in item:
            key, _, val = item.partition("=")
            params[key.strip().lower()] = unquote(val.strip())
    payload = match.group("data")
    if match.group("base64"):
        try:
            raw = base64.b64decode(unquote(payload), validate=True)
        except (binascii.Error, ValueError) as e:
            raise MultipartDecodeError(f"Invalid base64 payload in data URI for part {name!r}") from e
    else:
        raw = unquote_to_bytes(payload)
    return FilePart(
        name=name,
        filename=params.get("name") or params.get("filename") or None,
        content_type=match.group("mediatype") or None,
        size=len(raw),
        encoding="data-uri",
    )


def is_file_field(name: str) -> bool:
    """A part counts as a file when its name starts with 'file' or is exactly 'generatedFile'."""
    return name.startswith(FILE_PART_PREFIX) or name == GENERATED_FILE_PART


def _form_param(value: bytes) -> str:
    """Decode a Content-Disposition parameter and undo the %22 / %0D / %0A form escapes."""
    text = value.decode("utf-8", errors="replace")
    return _FORM_PARAM_ESCAPE_RE.sub(lambda m: _FORM_PARAM_ESCAPES[m.group(0).upper()], text)


def _to_decoded(raw: _RawPart) -> DecodedPart:
    disposition = raw.headers.get("content-disposition")
    if disposition is None:
        raise MultipartDecodeError("Multipart part is missing Content-Disposition")
    disposition_type, options = parse_options_header(disposition)
    if disposition_type.lower() != b"form-data" or not options.get(b"name"):
        raise MultipartDecodeError("Multipart part is not a named form-data field")
    name = _form_param(options[b"name"])

    content_type_header = raw.headers.get("content-type", b"")
    content_type = content_type_header.decode("latin-1").strip() or None

    if b"filename" in options:
        filename = _form_param(options[b"filename"]) or None
        return FilePart(
            name=name,
            filename=filename,
            content_type=content_type,
            size=len(raw.data),
        )

    charset = "utf-8"
    if content_type:
        _, ct_options = parse_options_header(content_type_header)
        charset = ct_options.get(b"charset", b"utf-8").decode("latin-1")
    try:
        value = bytes(raw.data).decode(charset)
    except (UnicodeDecodeError, LookupError) as e:
        raise MultipartDecodeError(f"Field {name!r} is not valid {charset} text") from e

    # Only file fields may carry a file as a data: URI; other fields keep the raw text.
    if is_file_field(name):
        data_uri_part = _parse_data_uri(name, value)
        if data_uri_part is not None:
            return data_uri_part
    return ScalarPart(name=name, value=value)


def parse_multipart(content_type_header: str | None, body: bytes) -> list[DecodedPart]:
    """
    Parse a multipart/form-data body into tagged parts, in body order.

    Args:
        content_type_header: The request's Content-Type header (must carry a boundary).
        body: The complete request body.

    Returns:
        List of ScalarPart / FilePart, one per part encountered.

    Raises:
        MultipartDecodeError: On a missing boundary, broken framing, a part without
            a form-data name, undecodable text, or an invalid data URI payload.
    """
    boundary = boundary_from_content_type(content_type_header)
    raw_parts = _split_parts(boundary, body)
    decoded = [_to_decoded(raw) for raw in raw_parts]
    logger.debug(
        "[multipart_parser:parse_multipart] parts=%d files=%d",
        len(decoded),
        sum(isinstance(p, FilePart) for p in decoded),
    )
    return decoded
