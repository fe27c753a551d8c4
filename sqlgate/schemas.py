"""
Wire schemas for POST /api/{db_name}.

Request bodies are validated loosely on purpose: per-item shape rules
(exactly one of query/statement, values vs valuesBatch, parameter objects)
are checked later by ``ItemPlan.from_item`` so that a malformed item goes
through its own noFail policy instead of rejecting the whole request.

Responses are built with only the relevant fields set and dumped with
``exclude_unset`` so absent fields never appear as ``null``.
"""

from enum import Enum
from typing import Any, NamedTuple

from pydantic import ConfigDict, Field
from sqlmodel import SQLModel

from sqlgate.core.errors import ItemValidationError

# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class Credentials(SQLModel):
    user: str
    password: str


class TransactionItem(SQLModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    statement: str | None = None
    values: Any = None
    values_batch: Any = Field(default=None, alias="valuesBatch")
    no_fail: bool = Field(default=False, alias="noFail")


class TransactionRequest(SQLModel):
    """Body for POST /api/{db_name}."""

    credentials: Credentials | None = None
    transaction: list[TransactionItem]


# ---------------------------------------------------------------------------
# Item plan: the validated, tagged form of a TransactionItem
# ---------------------------------------------------------------------------


class ItemKind(str, Enum):
    QUERY = "query"
    STATEMENT = "statement"


class ParamsMode(str, Enum):
    NONE = "none"
    SINGLE = "single"
    BATCH = "batch"


class ItemPlan(NamedTuple):
    kind: ItemKind
    text: str
    params_mode: ParamsMode
    values: dict[str, Any] | None = None
    values_batch: list[dict[str, Any]] | None = None

    @classmethod
    def from_item(cls, item: TransactionItem) -> "ItemPlan":
        """Validate one item's shape; raises ItemValidationError."""
        if (item.query is None) == (item.statement is None):
            raise ItemValidationError(
                "exactly one of 'query' and 'statement' must be provided"
            )
        if item.values is not None and item.values_batch is not None:
            raise ItemValidationError(
                "at most one of 'values' and 'valuesBatch' must be provided"
            )
        kind = ItemKind.QUERY if item.query is not None else ItemKind.STATEMENT
        text = item.query if item.query is not None else item.statement

        if item.values is not None:
            if not isinstance(item.values, dict):
                raise ItemValidationError("'values' must be an object")
            return cls(kind, text, ParamsMode.SINGLE, values=item.values)

        if item.values_batch is not None:
            if kind == ItemKind.QUERY:
                raise ItemValidationError(
                    "'valuesBatch' is only allowed with 'statement'"
                )
            if not isinstance(item.values_batch, list):
                raise ItemValidationError("'valuesBatch' must be an array of objects")
            for i, v in enumerate(item.values_batch):
                if not isinstance(v, dict):
                    raise ItemValidationError(f"'valuesBatch[{i}]' must be an object")
            return cls(kind, text, ParamsMode.BATCH, values_batch=item.values_batch)

        return cls(kind, text, ParamsMode.NONE)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class ResponseItem(SQLModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    error: str | None = None
    result_set: list[dict[str, Any]] | None = Field(default=None, alias="resultSet")
    rows_updated: int | None = Field(default=None, alias="rowsUpdated")
    rows_updated_batch: list[int] | None = Field(
        default=None, alias="rowsUpdatedBatch"
    )

    @classmethod
    def failed(cls, message: str) -> "ResponseItem":
        return cls(success=False, error=message)


class GatewayResponse(SQLModel):
    """Either ``{success: true, results}`` or ``{success: false, errorCode, message}``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    results: list[ResponseItem] | None = None
    error_code: int | None = Field(default=None, alias="errorCode")
    message: str | None = None

    @classmethod
    def ok(cls, results: list[ResponseItem]) -> "GatewayResponse":
        return cls(success=True, results=results)

    @classmethod
    def error(cls, error_code: int, message: str) -> "GatewayResponse":
        return cls(success=False, error_code=error_code, message=message)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class GatewayOutcome(NamedTuple):
    """Terminal result of one request: transport status plus body."""

    status_code: int
    response: GatewayResponse
