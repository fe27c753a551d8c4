"""Unit tests for result translation: SQLite rows -> JSON objects."""

import base64
import sqlite3

import pytest

from sqlgate.core.result_transform import cursor_to_json, row_to_json, sql_to_json


def test_scalar_values() -> None:
    assert sql_to_json(None) is None
    assert sql_to_json(7) == 7
    assert sql_to_json(2.5) == 2.5
    assert sql_to_json("x") == "x"


def test_blob_is_base64() -> None:
    assert sql_to_json(b"\xde\xad\xbe\xef") == "3q2+7w=="
    assert sql_to_json(b"") == ""
    assert base64.b64decode(sql_to_json(bytes(range(256)))) == bytes(range(256))


def test_unknown_type_raises() -> None:
    with pytest.raises(TypeError):
        sql_to_json(object())


def test_row_keeps_column_order() -> None:
    out = row_to_json(["b", "a", "c"], [1, 2, None])
    assert list(out) == ["b", "a", "c"]
    assert out == {"b": 1, "a": 2, "c": None}


def test_duplicate_column_last_wins() -> None:
    assert row_to_json(["x", "x"], [1, 2]) == {"x": 2}


def test_cursor_to_json_reads_all_rows() -> None:
    conn = sqlite3.connect(":memory:")
    try:
        conn.execute("CREATE TABLE r (id INTEGER, name TEXT, data BLOB, score REAL)")
        conn.execute("INSERT INTO r VALUES (1, 'a', x'0102', 0.5)")
        conn.execute("INSERT INTO r VALUES (2, NULL, NULL, NULL)")
        cur = conn.execute("SELECT id, name, data, score FROM r ORDER BY id")
        assert cursor_to_json(cur) == [
            {"id": 1, "name": "a", "data": "AQI=", "score": 0.5},
            {"id": 2, "name": None, "data": None, "score": None},
        ]
    finally:
        conn.close()


def test_cursor_to_json_empty_and_no_description() -> None:
    conn = sqlite3.connect(":memory:")
    try:
        conn.execute("CREATE TABLE r (id INTEGER)")
        assert cursor_to_json(conn.execute("SELECT * FROM r")) == []
        assert cursor_to_json(conn.execute("INSERT INTO r VALUES (1)")) == []
    finally:
        conn.close()


def test_non_finite_real_becomes_null() -> None:
    assert sql_to_json(float("inf")) is None
    assert sql_to_json(float("-inf")) is None
    assert sql_to_json(float("nan")) is None


def test_cursor_with_infinite_real() -> None:
    conn = sqlite3.connect(":memory:")
    try:
        cur = conn.execute("SELECT 1e999 AS big, -1e999 AS small, 2.5 AS ok")
        assert cursor_to_json(cur) == [{"big": None, "small": None, "ok": 2.5}]
    finally:
        conn.close()
