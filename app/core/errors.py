"""
Application errors for clean upload error handling.

Each error is caught at the boundary of the operation that produced it:
the client turns AssetReadError / TransferError into a failed UploadOutcome,
the API turns MultipartDecodeError into a 500 JSON payload.
AssetPermissionError never reaches the upload core.
"""


class UploadError(Exception):
    """Base class for upload errors. Carries a user-facing message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AssetPermissionError(UploadError):
    """Raised by the asset source when access to the selected assets is refused."""


class AssetReadError(UploadError):
    """Raised when an asset's content cannot be read while building the body."""


class TransferError(UploadError):
    """Raised by a transport when the request cannot be sent or the response cannot be read."""


class MultipartDecodeError(UploadError):
    """Raised when a received multipart body is malformed."""
