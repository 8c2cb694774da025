"""Create the data directory and apply database migrations."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from app.database import run_migrations
from app.logging_config import configure_logging


logger = logging.getLogger("initial_setup")


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialise the club portal database.")
    parser.add_argument("--revision", default="head", help="Alembic revision to upgrade to")
    args = parser.parse_args()

    configure_logging()
    data_dir = Path("data")
    data_dir.mkdir(exist_ok=True)
    run_migrations(args.revision)
    logger.info("Database migrated to %s", args.revision)
    print("Database initialised at", data_dir)


if __name__ == "__main__":
    main()
