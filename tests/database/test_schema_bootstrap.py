from __future__ import annotations

from pathlib import Path

from src.smart_attendance.smart_attendance.database.bootstrap import _iter_sql_statements, _load_schema_sql

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_split_ignores_semicolons_in_literals():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c\\\";d\");\nSELECT 1"
    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c\\";d")',
        "SELECT 1",
    ]


def test_schema_file_loads_without_database_scoping():
    sql = _load_schema_sql(SCHEMA)
    statements = list(_iter_sql_statements(sql))

    assert "USE smart_attendance" not in sql
    assert all(s.upper().startswith("CREATE TABLE") for s in statements)
    assert len(statements) == 3
    assert any("uq_attendance_student_date (student_id, date)" in s for s in statements)
