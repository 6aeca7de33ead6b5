"""
Assets to upload, and the filesystem asset source.

An Asset is one binary item: in-memory bytes, a readable binary file object,
or a uri (local path, file:// URI, or data: URI) read lazily at encode time.
"""

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from urllib.parse import unquote, unquote_to_bytes, urlparse

from app.core.errors import AssetPermissionError, AssetReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Asset:
    """One binary item selected for upload."""

    content: bytes | BinaryIO | None = None
    uri: str | None = None
    filename: str | None = None
    content_type: str | None = None

    def read(self) -> bytes:
        """
        Return the asset's bytes.

        Raises:
            AssetReadError: If the backing file, handle or data URI cannot be read.
        """
        if isinstance(self.content, (bytes, bytearray)):
            return bytes(self.content)
        if self.content is not None:
            try:
                if self.content.seekable():
                    self.content.seek(0)
                return self.content.read()
            except (OSError, ValueError) as e:
                raise AssetReadError(f"Cannot read {self.filename or 'asset'}: {e}") from e
        if self.uri:
            return _read_uri(self.uri)
        raise AssetReadError("Asset has no content and no uri")


def _read_uri(uri: str) -> bytes:
    if uri.startswith("data:"):
        header, sep, payload = uri.partition(",")
        if not sep:
            raise AssetReadError("Malformed data URI")
        if header.endswith(";base64"):
            try:
                return base64.b64decode(unquote(payload), validate=True)
            except (binascii.Error, ValueError) as e:
                raise AssetReadError(f"Invalid base64 in data URI: {e}") from e
        return unquote_to_bytes(payload)
    path = Path(unquote(urlparse(uri).path)) if uri.startswith("file://") else Path(uri)
    try:
        return path.read_bytes()
    except OSError as e:
        raise AssetReadError(f"Cannot read {uri}: {e.strerror or e}") from e


def text_asset(text: str, filename: str, content_type: str = "text/plain") -> Asset:
    """Wrap generated text as an in-memory UTF-8 asset."""
    return Asset(content=text.encode("utf-8"), filename=filename, content_type=content_type)


def collect_assets(paths: list[str]) -> list[Asset]:
    """
    Asset source for local files: one uri-backed Asset per path, in the given order.

    Content is not read here; a file that disappears before the upload fails
    inside the upload call like any other unreadable asset.

    Raises:
        AssetPermissionError: If any existing path is not readable by this process.
    """
    denied = [p for p in paths if os.path.exists(p) and not os.access(p, os.R_OK)]
    if denied:
        logger.warning("[assets:collect_assets] permission denied for %d path(s)", len(denied))
        raise AssetPermissionError(f"Permission to read {', '.join(denied)} is required!")
    return [Asset(uri=str(p)) for p in paths]
