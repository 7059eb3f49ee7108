"""Schema bootstrap for ``flask init-db`` and AUTO_INIT_DB."""

from __future__ import annotations

import logging
import re
from contextlib import closing
from importlib import resources
from pathlib import Path
from typing import Iterator, Optional

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_RESOURCE = "schema.sql"

# schema.sql may pin a database name; the configured one wins.
_IGNORED_LINES = (
    re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$"),
    re.compile(r"(?im)^\s*USE\b.*?;\s*$"),
    re.compile(r"(?m)^\s*--.*$"),
)

_QUOTED_OR_TERMINATOR = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|;", re.S)


def _prepare_script(sql: str) -> str:
    for pattern in _IGNORED_LINES:
        sql = pattern.sub("", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level ';'. Quoted semicolons stay in their statement."""
    start = 0
    for match in _QUOTED_OR_TERMINATOR.finditer(sql):
        if match.group() != ";":
            continue
        stmt = sql[start : match.start()].strip()
        start = match.end()
        if stmt:
            yield stmt

    tail = sql[start:].strip()
    if tail:
        yield tail


def _server(target: DBConfig, *, database: bool = True):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if database:
        params["database"] = target.database
    return closing(mysql.connector.connect(**params))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _server(target, database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def read_schema(schema_path: Optional[str | Path] = None) -> str:
    """Schema script shipped with the package, or the file at schema_path."""
    if schema_path is not None:
        return Path(schema_path).read_text(encoding="utf-8")
    return resources.files(__package__).joinpath(SCHEMA_RESOURCE).read_text(encoding="utf-8")


def schema_statements(schema_path: Optional[str | Path] = None) -> list[str]:
    return list(iter_sql_statements(_prepare_script(read_schema(schema_path))))


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> int:
    """Create the database if needed and run every statement of schema.sql.

    All tables use CREATE TABLE IF NOT EXISTS, so running it again is harmless.
    Returns the number of statements executed.
    """
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    statements = schema_statements(schema_path)

    with _server(target) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()

    logger.info("schema applied source=%s statements=%d", schema_path or SCHEMA_RESOURCE, len(statements))
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with _server(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
