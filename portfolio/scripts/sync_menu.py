"""Back-fill menu items for existing sections.

Usage:
    portfolio-sync-menu                 Sync against the configured database
    portfolio-sync-menu --migrate       Apply pending migrations first

Environment Variables:
    DATABASE_URL        Database DSN (default: in-memory SQLite)
    MIGRATIONS_DIR      Migrations directory used with --migrate
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from portfolio.config import load_config
from portfolio.db.base import get_engine
from portfolio.db.migrations_runner import apply_migrations
from portfolio.errors import PortfolioError
from portfolio.logging_setup import configure_logging
from portfolio.logic import section_sync

logger = logging.getLogger("portfolio.scripts.sync_menu")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="portfolio-sync-menu",
        description="Create or refresh one menu item per content section",
    )
    parser.add_argument("--migrate", action="store_true", help="apply pending migrations before syncing")
    parser.add_argument("--log-level", default=None, help="logging level (default: INFO)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    cfg = load_config()

    try:
        if args.migrate:
            applied = apply_migrations(get_engine(), migrations_dir=cfg.migrations.directory)
            logger.info("sync_menu.migrations applied=%s", applied)
        outcomes = section_sync.sync_all_sections()
    except PortfolioError as exc:
        logger.error("sync_menu.failed code=%s message=%s", exc.code, exc.message)
        return 1

    for outcome in outcomes:
        logger.info("sync_menu.%s slug=%s menu_item_id=%s", outcome.action, outcome.slug, outcome.menu_item_id)
    logger.info("sync_menu.done sections=%s", len(outcomes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
