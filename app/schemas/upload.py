"""Schemas for the upload endpoint."""

from pydantic import BaseModel, Field


class FileInfo(BaseModel):
    """Metadata for one decoded file part."""

    name: str = Field(..., description="Original filename, or 'unknown' when the part carried none.")
    type: str = Field(..., description="Content type, or application/octet-stream when the part carried none.")
    size: int = Field(..., description="Payload size in bytes.")


class UploadResult(BaseModel):
    """
    Response body for POST /api/upload (camelCase on the wire).

    Optional fields are omitted from the JSON when unset, so a failure carries
    no files and a request without a source echoes no source.
    """

    success: bool
    message: str
    upload_time: str | None = Field(None, alias="uploadTime", description="Echoed from the request, unparsed.")
    total_files: int | None = Field(
        None,
        alias="totalFiles",
        description="Client-declared count when it parses as an integer, else the decoded file count.",
    )
    files: list[FileInfo] | None = Field(None, description="One entry per decoded file part, in body order.")
    source: str | None = Field(None, description="Echoed from the request.")
    error: str | None = Field(None, description="Diagnostic; present only when success is false.")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "message": "Files uploaded successfully",
                    "uploadTime": "2025-01-01T12:00:00.000Z",
                    "totalFiles": 2,
                    "files": [
                        {"name": "photo.png", "type": "image/png", "size": 20481},
                        {"name": "image_1.jpg", "type": "image/jpg", "size": 10240},
                    ],
                },
                {"success": False, "message": "Upload failed", "error": "Missing boundary in multipart body"},
            ]
        },
    }

    def to_payload(self) -> dict:
        """JSON-ready dict with wire names; unset optional fields are dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)
