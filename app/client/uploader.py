"""
Client upload operations: build, encode and send one request; report a terminal outcome.

Responsibility: The public client boundary. Every failure (unreadable asset,
transport error, non-2xx status, unparseable response) is caught here and
returned as an UploadOutcome; nothing is raised to the caller. One send per
call, no retries. The presentation layer owns the status display and clears
it after outcome.clear_after seconds.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from app.client.assets import Asset
from app.client.encoder import UploadRequest, build_blob_request, build_image_request, encode_request
from app.client.transport import Transport
from app.core.config import STATUS_CLEAR_SECONDS, UPLOAD_ENDPOINT
from app.core.errors import UploadError
from app.schemas.upload import UploadResult

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


@dataclass(frozen=True)
class UploadOutcome:
    """Terminal result of one upload call."""

    success: bool
    message: str
    result: UploadResult | None = None
    clear_after: float = STATUS_CLEAR_SECONDS


def _send(
    request: UploadRequest,
    transport: Transport,
    context: str,
    success_message: str,
) -> UploadOutcome:
    try:
        encoded = encode_request(request)
        logger.info(
            "[uploader:%s] POST %s files=%d body_len=%d",
            context,
            UPLOAD_ENDPOINT,
            len(request.files),
            len(encoded.body),
        )
        response = transport.send(UPLOAD_ENDPOINT, encoded.body, encoded.content_type)
        if not response.ok:
            raise UploadError(f"HTTP error! status: {response.status_code}")
        result = UploadResult.model_validate(response.json())
    except UploadError as e:
        logger.warning("[uploader:%s] upload failed: %s", context, e.message)
        return UploadOutcome(success=False, message=f"{context} upload failed: {e.message}")
    except Exception as e:
        logger.warning("[uploader:%s] upload failed: %s", context, e)
        return UploadOutcome(success=False, message=f"{context} upload failed: {e}")
    logger.info("[uploader:%s] OUT totalFiles=%s files=%d", context, result.total_files, len(result.files or []))
    return UploadOutcome(success=True, message=success_message, result=result)


def upload_assets(
    assets: list[Asset],
    transport: Transport,
    context: str | None = None,
    on_status: StatusCallback | None = None,
) -> UploadOutcome:
    """
    Upload assets as parts file0..fileN-1 plus totalFiles and uploadTime.

    Args:
        assets: Ordered assets; order fixes the part names.
        transport: Mechanism used for the single POST.
        context: Label used in status strings (defaults to the transport's label).
        on_status: Optional callback receiving the in-progress status string.
    """
    context = context or transport.label
    if on_status:
        on_status(f"Uploading with {context}...")
    request = build_image_request(assets)
    return _send(
        request,
        transport,
        context,
        f"{context} upload successful! {len(assets)} images uploaded",
    )


def upload_generated_blob(
    transport: Transport,
    native_binary: bool = True,
    on_status: StatusCallback | None = None,
) -> UploadOutcome:
    """Upload the fixed sample text as generatedFile with source=blob."""
    if on_status:
        on_status("Uploading blob...")
    request = build_blob_request(native_binary=native_binary)
    return _send(request, transport, "Blob", "Blob upload successful!")
