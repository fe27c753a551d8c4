"""
Gateway: POST /{db_name} runs one JSON-described transaction.

Flow: lookup database -> acquire its lock -> auth -> transaction -> release.
The runner is sync/blocking; it runs in a worker thread so the event loop keeps
serving other databases. If the client goes away, the thread still finishes
the transaction and releases the lock.
"""

import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from sqlgate.api.deps import BasicCredentialsDep, RegistryDep
from sqlgate.core.errors import DatabaseBusyError, DatabaseNotFoundError
from sqlgate.core.gateway import run_request
from sqlgate.core.pool import DatabaseRegistry
from sqlgate.schemas import Credentials, GatewayOutcome, GatewayResponse, TransactionRequest

router = APIRouter(prefix="", tags=["gateway"])


def _run_in_thread(
    registry: DatabaseRegistry,
    db_name: str,
    body: TransactionRequest,
    basic_credentials: Credentials | None,
) -> GatewayOutcome:
    """Hold the database lock for the whole auth + transaction."""
    with registry.acquire(db_name) as handle:
        return run_request(
            handle.conn,
            body,
            handle.config,
            handle.stored_statements,
            basic_credentials=basic_credentials,
        )


def _gateway_error(status_code: int, message: str) -> JSONResponse:
    """Failure envelope for errors raised before any item runs."""
    body = GatewayResponse.error(-1, message).to_wire()
    return JSONResponse(status_code=status_code, content=body)


@router.post("/{db_name}")
async def execute_transaction(
    db_name: str,
    body: TransactionRequest,
    registry: RegistryDep,
    basic: BasicCredentialsDep,
) -> JSONResponse:
    """
    Execute ``body.transaction`` atomically on database ``db_name``.

    200 with per-item results on commit; on rollback the failing item's index
    as ``errorCode`` (-1 for auth/commit failures), with 400/401/404/503.
    """
    basic_credentials = (
        Credentials(user=basic.username, password=basic.password) if basic else None
    )
    try:
        outcome = await asyncio.to_thread(
            _run_in_thread, registry, db_name, body, basic_credentials
        )
    except (DatabaseNotFoundError, DatabaseBusyError) as e:
        return _gateway_error(e.status_code, e.message)
    return JSONResponse(
        status_code=outcome.status_code, content=outcome.response.to_wire()
    )
