#!/usr/bin/env python3
"""Move salary records off the legacy 1970-01 placeholder period."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from compensation.core.config import get_settings  # noqa: E402
from compensation.core.logger import get_logger, init_logging, timeit  # noqa: E402
from compensation.db.session import session_scope  # noqa: E402
from compensation.services.period_migration import migrate_legacy_periods  # noqa: E402

LOGGER = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", type=str, default=None, help="SQLAlchemy URL; defaults to the configured database")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    init_logging(app_name="migrate-periods", level=settings.logging.level, log_dir=settings.logging.log_dir)

    with timeit("Salary period migration", logger=LOGGER):
        with session_scope(args.url) as session:
            outcome = migrate_legacy_periods(session)

    if outcome.remaining:
        LOGGER.warning("%d records still need manual attention", outcome.remaining)
        sys.exit(1)


if __name__ == "__main__":
    main()
