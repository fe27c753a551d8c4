"""
Gateway: auth, statement resolution and the transaction runner.
"""

from sqlgate.core.gateway.auth import check_credentials, verify_request_auth
from sqlgate.core.gateway.resolver import StoredStatements, resolve_sql
from sqlgate.core.gateway.runner import run as run_request
from sqlgate.core.gateway.runner import run_item, run_transaction

__all__ = [
    "StoredStatements",
    "check_credentials",
    "resolve_sql",
    "run_item",
    "run_request",
    "run_transaction",
    "verify_request_auth",
]
