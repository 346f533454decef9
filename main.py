#!/usr/bin/env python3
"""
Deal Feed Explorer - launch the web GUI.

Usage:
    python main.py                          # http://localhost:8000
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 127.0.0.1         # bind to localhost only
    python main.py --local-data feed.json   # serve a different snapshot
    python main.py --reload                 # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import sys
import webbrowser
from pathlib import Path

from utils.config import DEFAULT_LOCAL_PATH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Launch the Deal Feed Explorer web interface.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--local-data", type=Path, default=None,
        help="JSON snapshot for the 'Local File' source "
             "(default: static/test-data.json or FEED_LOCAL_PATH env var)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # The app reads its configuration from the environment at import time.
    if args.local_data is not None:
        os.environ["FEED_LOCAL_PATH"] = str(args.local_data)

    local_path = Path(os.getenv("FEED_LOCAL_PATH", str(DEFAULT_LOCAL_PATH)))
    if not os.getenv("FEED_API_BASE_URL"):
        print("Warning: FEED_API_BASE_URL is not set; the 'API' source will report an error.")
        print("  Set FEED_API_BASE_URL and FEED_DEVELOPER_KEY, or use the 'Local File' source.")
        print()
    if not local_path.exists():
        print(f"Warning: local snapshot not found at {local_path}")
        print()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Deal Feed Explorer at {url}")
    print(f"Local snapshot: {local_path}")
    print()

    if not args.no_browser:
        # Open browser after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
