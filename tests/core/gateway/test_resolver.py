"""Unit tests for the statement resolver and the stored statement registry."""

import pytest

from sqlgate.core.errors import ResolutionError
from sqlgate.core.gateway.resolver import StoredStatements, resolve_sql
from sqlgate.models import StoredStatementConfig


@pytest.fixture
def stored() -> StoredStatements:
    return StoredStatements(
        [
            StoredStatementConfig(id="Q1", sql="SELECT * FROM t"),
            StoredStatementConfig(id="INS", sql="INSERT INTO t VALUES (:v)"),
        ]
    )


def test_stored_statement_substituted(stored: StoredStatements) -> None:
    assert resolve_sql("Q1", stored) == "SELECT * FROM t"
    assert resolve_sql("INS", stored, use_only_stored=True) == "INSERT INTO t VALUES (:v)"


def test_raw_sql_passes_through(stored: StoredStatements) -> None:
    assert resolve_sql("SELECT 1", stored) == "SELECT 1"
    assert resolve_sql("SELECT 1", StoredStatements()) == "SELECT 1"


def test_stored_only_rejects_raw_sql(stored: StoredStatements) -> None:
    with pytest.raises(ResolutionError, match="not in the list of stored statements"):
        resolve_sql("SELECT 1", stored, use_only_stored=True)


def test_lookup_is_exact(stored: StoredStatements) -> None:
    """No case folding or trimming: near-misses are raw SQL (or rejected)."""
    assert resolve_sql("q1", stored) == "q1"
    assert resolve_sql(" Q1", stored) == " Q1"
    with pytest.raises(ResolutionError):
        resolve_sql("Q1 ", stored, use_only_stored=True)


def test_registry_is_read_only(stored: StoredStatements) -> None:
    assert len(stored) == 2
    assert sorted(stored) == ["INS", "Q1"]
    with pytest.raises(TypeError):
        stored["Q2"] = "SELECT 2"  # type: ignore[index]
    with pytest.raises(TypeError):
        stored._by_id["Q2"] = "SELECT 2"  # type: ignore[index]
