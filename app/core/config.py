"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and the
upload wire contract shared by the client encoder and the server decoder.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Upload wire contract (names are fixed; both sides import them from here)
UPLOAD_ENDPOINT: str = "/api/upload"
FILE_PART_PREFIX: str = "file"
GENERATED_FILE_PART: str = "generatedFile"
TOTAL_FILES_FIELD: str = "totalFiles"
UPLOAD_TIME_FIELD: str = "uploadTime"
SOURCE_FIELD: str = "source"

# Content-type defaults
DEFAULT_IMAGE_TYPE: str = "image/jpeg"
DEFAULT_FILE_TYPE: str = "application/octet-stream"
UNKNOWN_FILENAME: str = "unknown"

# Synthetic blob upload
BLOB_TEXT: str = "This is a sample text content created as a blob"
BLOB_FILENAME: str = "generated-file.txt"
BLOB_CONTENT_TYPE: str = "text/plain"
BLOB_SOURCE: str = "blob"

# Response messages
SUCCESS_MESSAGE: str = "Files uploaded successfully"
FAILURE_MESSAGE: str = "Upload failed"

# Status strings shown by the presentation layer revert to empty after this delay
STATUS_CLEAR_SECONDS: float = 3.0

# Client side (from env)
API_BASE: str = os.getenv("API_BASE", "http://localhost:8000").strip().rstrip("/")
TRANSFER_TIMEOUT: float = float(os.getenv("TRANSFER_TIMEOUT", "30").strip() or "30")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
