"""
Gateway runner: execute one transaction request on an exclusively held
connection.

Flow: auth -> BEGIN -> for each item (validate -> resolve -> execute) ->
COMMIT with per-item results, or ROLLBACK with the failing item's index.

Each item runs inside its own SAVEPOINT. A failed item is rolled back to its
savepoint, so a ``noFail`` item that fails halfway (e.g. in the middle of a
batch) leaves nothing behind while earlier items stay visible to later ones.
A failing item without ``noFail`` stops processing; the whole transaction is
rolled back.

The caller must hold the database lock for the whole call; this module never
leaves a transaction open, on any exit path.
"""

import logging
import sqlite3
from collections.abc import Mapping

from sqlgate.core.errors import (
    SQLITE_ERRORS,
    AuthError,
    EngineError,
    GatewayError,
)
from sqlgate.core.gateway.auth import verify_request_auth
from sqlgate.core.gateway.resolver import resolve_sql
from sqlgate.engines.sql.executor import execute_batch, execute_query, execute_statement
from sqlgate.models import AuthModeEnum, DatabaseConfig
from sqlgate.schemas import (
    Credentials,
    GatewayOutcome,
    GatewayResponse,
    ItemKind,
    ItemPlan,
    ParamsMode,
    ResponseItem,
    TransactionItem,
    TransactionRequest,
)

logger = logging.getLogger(__name__)

_SAVEPOINT = "sqlgate_item"


class _TransactionLost(Exception):
    """The transaction or the item savepoint ended outside the runner's control."""


# ---------------------------------------------------------------------------
# Single item
# ---------------------------------------------------------------------------


def run_item(
    conn: sqlite3.Connection,
    item: TransactionItem,
    stored_statements: Mapping[str, str],
    use_only_stored: bool = False,
) -> ResponseItem:
    """Validate, resolve and execute one item; raises GatewayError on failure."""
    plan = ItemPlan.from_item(item)
    sql = resolve_sql(plan.text, stored_statements, use_only_stored)
    logger.debug("Executing %s: %s", plan.kind.value, sql)

    if plan.kind == ItemKind.QUERY:
        rows = execute_query(conn, sql, plan.values)
        return ResponseItem(success=True, result_set=rows)

    if plan.params_mode == ParamsMode.BATCH:
        counts = execute_batch(conn, sql, plan.values_batch or [])
        return ResponseItem(success=True, rows_updated_batch=counts)

    count = execute_statement(conn, sql, plan.values)
    return ResponseItem(success=True, rows_updated=count)


def _run_item_in_savepoint(
    conn: sqlite3.Connection,
    item: TransactionItem,
    stored_statements: Mapping[str, str],
    use_only_stored: bool,
) -> ResponseItem:
    conn.execute(f"SAVEPOINT {_SAVEPOINT}")
    try:
        result = run_item(conn, item, stored_statements, use_only_stored)
    except GatewayError as e:
        if not conn.in_transaction:
            raise _TransactionLost(f"transaction rolled back by engine: {e.message}") from e
        _end_savepoint(conn, rollback=True)
        raise
    if not conn.in_transaction:
        raise _TransactionLost("transaction ended by the statement")
    _end_savepoint(conn)
    return result


def _end_savepoint(conn: sqlite3.Connection, *, rollback: bool = False) -> None:
    # fails when the item's own SQL released or rolled back the savepoint
    try:
        if rollback:
            conn.execute(f"ROLLBACK TO {_SAVEPOINT}")
        conn.execute(f"RELEASE {_SAVEPOINT}")
    except SQLITE_ERRORS as e:
        raise _TransactionLost(f"transaction state changed by the statement: {e}") from e


# ---------------------------------------------------------------------------
# Whole transaction
# ---------------------------------------------------------------------------


def _rollback_quiet(conn: sqlite3.Connection) -> None:
    try:
        conn.rollback()
    except SQLITE_ERRORS:
        logger.exception("Rollback failed")


def run_transaction(
    conn: sqlite3.Connection,
    items: list[TransactionItem],
    stored_statements: Mapping[str, str],
    *,
    use_only_stored: bool = False,
    db_name: str = "",
) -> GatewayOutcome:
    """
    Run ``items`` in one transaction and return the terminal outcome.

    Item failures never raise; they become either a failed ResponseItem
    (``noFail``) or a failure response with the item's index. Other
    exceptions roll back and propagate.
    """
    results: list[ResponseItem] = []
    failed: tuple[int, GatewayError] | None = None

    try:
        conn.execute("BEGIN")
    except SQLITE_ERRORS as e:
        err = EngineError.from_sqlite(e)
        return GatewayOutcome(err.status_code, GatewayResponse.error(-1, err.message))

    try:
        for idx, item in enumerate(items):
            try:
                results.append(
                    _run_item_in_savepoint(conn, item, stored_statements, use_only_stored)
                )
            except _TransactionLost as e:
                failed = (idx, EngineError(str(e)))
                break
            except GatewayError as e:
                logger.warning(
                    "Item %d failed (%s): %s",
                    idx,
                    type(e).__name__,
                    e.message,
                    extra={"db": db_name, "index": idx},
                )
                if item.no_fail:
                    results.append(ResponseItem.failed(e.message))
                    continue
                failed = (idx, e)
                break
    except BaseException:
        _rollback_quiet(conn)
        raise

    if failed is not None:
        idx, err = failed
        _rollback_quiet(conn)
        logger.warning(
            "Transaction rolled back at item %d",
            idx,
            extra={"db": db_name, "index": idx},
        )
        return GatewayOutcome(err.status_code, GatewayResponse.error(idx, err.message))

    try:
        conn.commit()
    except SQLITE_ERRORS as e:
        _rollback_quiet(conn)
        err = EngineError.from_sqlite(e)
        logger.warning("Commit failed: %s", err.message, extra={"db": db_name})
        return GatewayOutcome(err.status_code, GatewayResponse.error(-1, err.message))

    logger.info("Committed %d items", len(results), extra={"db": db_name})
    return GatewayOutcome(200, GatewayResponse.ok(results))


def run(
    conn: sqlite3.Connection,
    request: TransactionRequest,
    config: DatabaseConfig,
    stored_statements: Mapping[str, str],
    *,
    basic_credentials: Credentials | None = None,
) -> GatewayOutcome:
    """
    Auth gate, then the transaction.

    Credentials come from the request body, or from ``basic_credentials``
    (parsed from the Authorization header) when the database uses HTTP_BASIC.
    """
    creds = request.credentials
    if config.auth is not None and config.auth.mode == AuthModeEnum.HTTP_BASIC:
        creds = basic_credentials
    try:
        verify_request_auth(config.auth, creds, conn, db_name=config.id)
    except AuthError as e:
        return GatewayOutcome(e.status_code, GatewayResponse.error(-1, e.message))

    return run_transaction(
        conn,
        request.transaction,
        stored_statements,
        use_only_stored=config.use_only_stored_statements,
        db_name=config.id,
    )
