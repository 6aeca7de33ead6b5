#!/usr/bin/env python3
"""
Upload local files (or the generated sample blob) to the upload API.

Run from project root with the backend running (uvicorn app.main:app):

    python scripts/upload_files.py photos/a.png photos/b.jpg
    python scripts/upload_files.py --transport httpx photos/a.png
    python scripts/upload_files.py --blob
    python scripts/upload_files.py --blob --data-uri

Prints the terminal status string and the per-file metadata echoed by the server.
Exit code is 0 on success, 1 on a failed upload, 2 when access to a file is denied.
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root on path so "app" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app.client.assets import collect_assets
from app.client.transport import TRANSPORTS, make_transport
from app.client.uploader import upload_assets, upload_generated_blob
from app.core.config import API_BASE, LOG_LEVEL
from app.core.errors import AssetPermissionError


def main() -> int:
    parser = argparse.ArgumentParser(description="Upload files to the multipart upload API.")
    parser.add_argument("paths", nargs="*", help="Files to upload, in part order (file0, file1, ...).")
    parser.add_argument("--blob", action="store_true", help="Upload the generated sample text blob instead of files.")
    parser.add_argument(
        "--data-uri",
        action="store_true",
        help="With --blob: send the payload as a data: URI string part instead of a binary part.",
    )
    parser.add_argument("--transport", choices=list(TRANSPORTS), default="requests")
    parser.add_argument("--base-url", default=API_BASE, help=f"API base URL (default: {API_BASE}).")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL)
    transport = make_transport(args.transport, args.base_url)

    if args.blob:
        outcome = upload_generated_blob(transport, native_binary=not args.data_uri, on_status=print)
    else:
        if not args.paths:
            parser.error("give at least one path, or --blob")
        try:
            assets = collect_assets(args.paths)
        except AssetPermissionError as e:
            print(f"Permission Required: {e.message}", file=sys.stderr)
            return 2
        outcome = upload_assets(assets, transport, on_status=print)

    print(outcome.message)
    if outcome.result is not None:
        for f in outcome.result.files or []:
            print(f"  {f.name}\t{f.type}\t{f.size}")
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
