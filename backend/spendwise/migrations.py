from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "sql"


def split_sql_statements(sql: str) -> list[str]:
    statements = []
    current: list[str] = []
    for line in sql.splitlines(keepends=True):
        if line.strip().startswith("--"):
            continue
        current.append(line)
        if line.strip().endswith(";"):
            statements.append("".join(current).strip())
            current = []
    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return [s for s in statements if s]


def apply_migrations(engine: Engine, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    migration_files = sorted(migrations_dir.glob("*.sql"))
    applied_now: list[str] = []
    if not migration_files:
        logger.info("No migration files found in %s", migrations_dir)
        return applied_now

    with engine.begin() as conn:
        conn.execute(
            text(
                """
                create table if not exists schema_migrations (
                  filename varchar(255) primary key,
                  applied_at timestamp not null default current_timestamp
                )
                """
            )
        )
        applied = {
            row[0]
            for row in conn.execute(text("select filename from schema_migrations")).fetchall()
        }

        for file in migration_files:
            if file.name in applied:
                continue
            for stmt in split_sql_statements(file.read_text(encoding="utf-8")):
                conn.execute(text(stmt))
            conn.execute(
                text("insert into schema_migrations (filename) values (:filename)"),
                {"filename": file.name},
            )
            applied_now.append(file.name)
            logger.info("Applied: %s", file.name)
    return applied_now
