# Run from project root: streamlit run app/ui.py
# UI talks to the backend upload API (POST /api/upload). It only selects assets and shows outcomes;
# encoding, sending and error handling live in app.client.uploader.

import os
import sys
import time
from pathlib import Path

# Ensure project root is on path (Streamlit may run with cwd != project root)
_root_from_file = Path(__file__).resolve().parent.parent
_cwd = os.getcwd()
for _root in (_root_from_file, _cwd):
    _root = str(_root)
    if _root not in sys.path:
        sys.path.insert(0, _root)

import streamlit as st

from app.client.assets import Asset
from app.client.transport import TRANSPORTS, make_transport
from app.client.uploader import UploadOutcome, upload_assets, upload_generated_blob
from app.core.config import API_BASE

st.title("File Upload Example")
st.caption("Test multipart image upload with requests or httpx, and a generated text blob.")

transport_kind = st.radio("Transport", list(TRANSPORTS), horizontal=True, key="transport_kind")

picked = st.file_uploader(
    "Pick from gallery",
    type=["png", "jpg", "jpeg", "gif", "webp", "heic"],
    accept_multiple_files=True,
)
photo = st.camera_input("Take photo")

selected = list(picked or [])
if photo is not None:
    selected.append(photo)

status = st.empty()


def _show(outcome: UploadOutcome) -> None:
    """Show the terminal status with the decoded files, then clear both after outcome.clear_after."""
    # Status and file list share one placeholder so a single empty() removes both.
    with status.container():
        if outcome.success:
            st.success(outcome.message)
            for f in (outcome.result.files or []) if outcome.result else []:
                st.caption(f"  • {f.name} ({f.type}, {f.size} bytes)")
        else:
            st.error(outcome.message)
    # Blocks this script run only; the next interaction starts a fresh run.
    time.sleep(outcome.clear_after)
    status.empty()


if selected:
    st.caption(f"Selected {len(selected)} image(s)")
    cols = st.columns(4)
    for col, uf in zip(cols, selected[:4]):
        col.image(uf, width=60)

    if st.button(f"Upload with {transport_kind}", key="upload_btn"):
        assets = [Asset(content=uf.getvalue(), uri=uf.name) for uf in selected]
        outcome = upload_assets(
            assets,
            make_transport(transport_kind, API_BASE),
            on_status=status.info,
        )
        _show(outcome)

native_blob = st.checkbox("Send blob as native binary part (uncheck for data: URI)", value=True)
if st.button("Create & Upload Blob", key="blob_btn"):
    outcome = upload_generated_blob(
        make_transport(transport_kind, API_BASE),
        native_binary=native_blob,
        on_status=status.info,
    )
    _show(outcome)
