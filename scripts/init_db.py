#!/usr/bin/env python3
"""Create the compensation tables and seed default business configuration."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from compensation.core.config import get_settings  # noqa: E402
from compensation.core.logger import get_logger, init_logging  # noqa: E402
from compensation.db.engine import create_sync_engine  # noqa: E402
from compensation.db.session import session_scope  # noqa: E402
from compensation.models import Base  # noqa: E402
from compensation.services import SalaryConfigService  # noqa: E402

LOGGER = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", type=str, default=None, help="SQLAlchemy URL; defaults to the configured database")
    parser.add_argument("--skip-seed", action="store_true", help="Only create tables, do not write default config")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    init_logging(app_name="init-db", level=settings.logging.level, log_dir=settings.logging.log_dir)

    engine = create_sync_engine(args.url)
    LOGGER.info("Creating tables on %s", args.url or settings.database.masked_url)
    Base.metadata.create_all(engine)

    if args.skip_seed:
        return
    with session_scope(args.url) as session:
        seeded = SalaryConfigService(session).seed_defaults()
    if seeded:
        LOGGER.info("Seeded config keys: %s", ", ".join(seeded))
    else:
        LOGGER.info("All config keys already present")


if __name__ == "__main__":
    main()
