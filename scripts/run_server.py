"""Run the club portal API with uvicorn."""
from __future__ import annotations

import argparse

import uvicorn

from app.config import get_settings
from app.logging_config import configure_logging


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Start the club portal API server.")
    parser.add_argument("--host", default=settings.app_host)
    parser.add_argument("--port", type=int, default=settings.app_port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development only)")
    return parser.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload, log_config=None)


if __name__ == "__main__":
    main()
