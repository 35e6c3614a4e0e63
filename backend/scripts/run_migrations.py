from __future__ import annotations

import logging

from sqlalchemy import create_engine

from spendwise.config import settings
from spendwise.migrations import apply_migrations

logger = logging.getLogger("spendwise.migrations")


def main() -> None:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    engine = create_engine(settings.database_url, future=True, pool_pre_ping=True)
    try:
        apply_migrations(engine)
    finally:
        engine.dispose()
    logger.info("Migration run finished.")


if __name__ == "__main__":
    main()
