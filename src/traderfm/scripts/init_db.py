"""Utility script to create or reset the configured database schema."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from traderfm.core.logging import configure_logging
from traderfm.core.settings import settings
from traderfm.db.session import Base, configure_engine

logger = logging.getLogger("traderfm.scripts.init_db")


def init_schema(db_url: str, *, drop_tables: bool = False) -> None:
    """Create every table for ``db_url``, optionally dropping them first."""
    engine = configure_engine(create_engine(db_url))
    try:
        if drop_tables:
            Base.metadata.drop_all(bind=engine)
            logger.info("dropped all tables")
        Base.metadata.create_all(bind=engine)
        logger.info("schema ready at %s", engine.url.render_as_string(hide_password=True))
    finally:
        engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset the configured database")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop every table before creating the schema.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    try:
        init_schema(args.url or settings.effective_database_url, drop_tables=args.drop_tables)
    except SQLAlchemyError as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
