from __future__ import annotations

import mysql.connector

from attendance_ledger.database import bootstrap


class RecordingConnection:
    def __init__(self, executed):
        self.executed = executed

    def cursor(self):
        return self

    def execute(self, sql, params=None):
        self.executed.append(sql)

    def commit(self):
        pass

    def close(self):
        pass


def test_bundled_schema_loads_from_package():
    statements = bootstrap.schema_statements()

    assert len(statements) == 9
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    ledger = next(s for s in statements if "leave_ledger (" in s)
    assert "uq_ledger_idempotency" in ledger


def test_schema_path_overrides_bundled_file(tmp_path):
    script = tmp_path / "schema.sql"
    script.write_text(
        "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\n-- note; with semicolon\nCREATE TABLE t (x INT);\n",
        encoding="utf-8",
    )

    assert bootstrap.schema_statements(script) == ["CREATE TABLE t (x INT)"]


def test_apply_schema_runs_bundled_statements(monkeypatch):
    executed = []
    monkeypatch.setattr(mysql.connector, "connect", lambda **kwargs: RecordingConnection(executed))

    count = bootstrap.apply_schema({"database": "ledger_test"})

    assert count == 9
    assert executed[0].startswith("CREATE DATABASE IF NOT EXISTS `ledger_test`")
    assert len(executed) == 10
