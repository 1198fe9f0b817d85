#!/usr/bin/env python3
"""
Server launcher for the content relay.

Host and port come from HOST / PORT (default 0.0.0.0:8000). Pass --reload
during development to restart on code changes.
"""

import argparse

import uvicorn

from content_relay.config import load_settings


def main() -> None:
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Content relay server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("-p", "--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    args = parser.parse_args()

    print(f"Server listening on http://{args.host}:{args.port} ...")
    uvicorn.run(
        "content_relay.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
