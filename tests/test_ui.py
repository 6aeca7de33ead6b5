"""
Tests for the Streamlit page, driven with streamlit's AppTest.

Upload calls are patched so no backend is needed; clear_after=0 keeps runs fast.
"""

from pathlib import Path
from unittest.mock import patch

from streamlit.testing.v1 import AppTest

from app.client.uploader import UploadOutcome
from app.schemas.upload import FileInfo, UploadResult

UI_PATH = str(Path(__file__).resolve().parent.parent / "app" / "ui.py")


def _outcome(success: bool) -> UploadOutcome:
    if not success:
        return UploadOutcome(success=False, message="Blob upload failed: HTTP error! status: 500", clear_after=0.0)
    result = UploadResult(
        success=True,
        message="Files uploaded successfully",
        total_files=1,
        files=[FileInfo(name="generated-file.txt", type="text/plain", size=47)],
        source="blob",
    )
    return UploadOutcome(success=True, message="Blob upload successful!", result=result, clear_after=0.0)


def _click_blob(outcome: UploadOutcome) -> AppTest:
    with patch("app.client.uploader.upload_generated_blob", return_value=outcome) as mock_upload:
        at = AppTest.from_file(UI_PATH, default_timeout=10)
        at.run()
        at.button(key="blob_btn").click().run()
    mock_upload.assert_called_once()
    return at


def test_status_and_file_list_clear_together() -> None:
    """After clear_after, neither the success status nor the decoded file list remains."""
    at = _click_blob(_outcome(success=True))
    assert not at.exception
    assert len(at.success) == 0
    assert not any("generated-file.txt" in c.value for c in at.caption)


def test_failure_status_clears() -> None:
    at = _click_blob(_outcome(success=False))
    assert not at.exception
    assert len(at.error) == 0
