from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the chess board API")
    parser.add_argument(
        "--host", default=os.environ.get("CHESS_HOST", "0.0.0.0"), help="Bind address"
    )
    parser.add_argument(
        "--port", type=int, default=int(os.environ.get("CHESS_PORT", "8000")), help="Bind port"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CHESS_LOG_LEVEL", "info"),
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level for the app and uvicorn",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    os.environ["CHESS_LOG_LEVEL"] = args.log_level
    uvicorn.run(
        "src.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
