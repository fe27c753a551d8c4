"""Unit tests for gateway auth: check_credentials / verify_request_auth."""

import hashlib
import sqlite3
from collections.abc import Generator

import pytest

from sqlgate.core.errors import AuthError
from sqlgate.core.gateway.auth import check_credentials, verify_request_auth
from sqlgate.core.security import get_password_hash
from sqlgate.models import AuthConfig
from sqlgate.schemas import Credentials


@pytest.fixture
def conn() -> Generator[sqlite3.Connection, None, None]:
    c = sqlite3.connect(":memory:", isolation_level=None)
    c.execute("CREATE TABLE users (name TEXT, pass TEXT)")
    c.execute("INSERT INTO users VALUES ('alice', 'wonder')")
    yield c
    c.close()


def _creds(user: str, password: str) -> Credentials:
    return Credentials(user=user, password=password)


def test_plain_password(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byCredentials": [{"user": "bob", "password": "s3cret"}]}
    )
    assert check_credentials(auth, _creds("bob", "s3cret"), conn) is True
    assert check_credentials(auth, _creds("bob", "wrong"), conn) is False
    assert check_credentials(auth, _creds("eve", "s3cret"), conn) is False


def test_bcrypt_hashed_password(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byCredentials": [{"user": "bob", "hashedPassword": get_password_hash("pw")}]}
    )
    assert check_credentials(auth, _creds("bob", "pw"), conn) is True
    assert check_credentials(auth, _creds("bob", "pw2"), conn) is False


def test_sha256_hex_hashed_password(conn: sqlite3.Connection) -> None:
    digest = hashlib.sha256(b"pw").hexdigest()
    auth = AuthConfig.model_validate(
        {"byCredentials": [{"user": "bob", "hashedPassword": digest}]}
    )
    assert check_credentials(auth, _creds("bob", "pw"), conn) is True
    assert check_credentials(auth, _creds("bob", "nope"), conn) is False


def test_unrecognized_hash_denies(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byCredentials": [{"user": "bob", "hashedPassword": "not-a-hash"}]}
    )
    assert check_credentials(auth, _creds("bob", "not-a-hash"), conn) is False


def test_several_users(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {
            "byCredentials": [
                {"user": "bob", "password": "one"},
                {"user": "carol", "password": "two"},
            ]
        }
    )
    assert check_credentials(auth, _creds("carol", "two"), conn) is True
    assert check_credentials(auth, _creds("carol", "one"), conn) is False


def test_by_query(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byQuery": "SELECT 1 FROM users WHERE name = :user AND pass = :password"}
    )
    assert check_credentials(auth, _creds("alice", "wonder"), conn) is True
    assert check_credentials(auth, _creds("alice", "land"), conn) is False


def test_by_query_error_denies(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate({"byQuery": "SELECT 1 FROM missing_table"})
    assert check_credentials(auth, _creds("alice", "wonder"), conn) is False


def test_by_query_with_several_statements_denies(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byQuery": "SELECT 1 FROM users WHERE name = :user; SELECT 1"}
    )
    assert check_credentials(auth, _creds("alice", "wonder"), conn) is False


def test_missing_credentials_denied(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byCredentials": [{"user": "bob", "password": "s3cret"}]}
    )
    assert check_credentials(auth, None, conn) is False


def test_verify_without_auth_config_allows(conn: sqlite3.Connection) -> None:
    verify_request_auth(None, None, conn)


def test_verify_raises_401(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {"byCredentials": [{"user": "bob", "password": "s3cret"}]}
    )
    with pytest.raises(AuthError) as exc_info:
        verify_request_auth(auth, _creds("bob", "bad"), conn, db_name="test")
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Authorization failed"


def test_verify_custom_error_code(conn: sqlite3.Connection) -> None:
    auth = AuthConfig.model_validate(
        {
            "byCredentials": [{"user": "bob", "password": "s3cret"}],
            "customErrorCode": 499,
        }
    )
    with pytest.raises(AuthError) as exc_info:
        verify_request_auth(auth, None, conn)
    assert exc_info.value.status_code == 499
