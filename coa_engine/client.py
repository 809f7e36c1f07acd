"""Async REST client for the chart-of-accounts API."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import httpx

from coa_engine import messages
from coa_engine.config import ApiConfig
from coa_engine.exceptions import (
    ApiError,
    ConfigurationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from coa_engine.models import AccountBalance, AccountFields, AccountLedger, AccountNode, AccountType
from coa_engine.serialization import (
    balance_from_payload,
    encode_body,
    ledger_from_payload,
    node_from_dict,
    tree_from_payload,
)

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Company-Id"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
JSON_HEADERS = {"Content-Type": "application/json"}


class CoaClient:
    """Thin async wrapper over ``/coa`` endpoints.

    Every call names its tenant explicitly; the client holds no notion of a
    "current company". Non-2xx responses and transport failures are raised
    as ``ApiError`` subclasses carrying the server's ``message`` verbatim.

    Parameters
    ----------
    config : ApiConfig | None
        Base URL, timeout and extra headers.
    transport : httpx.AsyncBaseTransport | None
        Custom transport (e.g. ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ApiConfig()
        self._client = httpx.AsyncClient(transport=transport, **self.config.to_client_kwargs())

    async def __aenter__(self) -> CoaClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- Tree ---

    async def fetch_tree(self, tenant_id: str) -> list[AccountNode]:
        """``GET /coa``: root accounts with nested children."""
        response = await self._request("GET", "/coa", tenant_id)
        return self._parse(response, tree_from_payload)

    async def fetch_flat(
        self,
        tenant_id: str,
        account_type: AccountType | None = None,
    ) -> list[AccountNode]:
        """``GET /coa?flatten=true``: every account, code order, no nesting."""
        params: dict[str, str] = {"flatten": "true"}
        if account_type is not None:
            params["type"] = AccountType(account_type).value
        response = await self._request("GET", "/coa", tenant_id, params=params)
        return self._parse(response, tree_from_payload)

    async def get_account(self, tenant_id: str, account_id: str) -> AccountNode:
        response = await self._request("GET", f"/coa/{account_id}", tenant_id)
        return self._parse(response, node_from_dict)

    # --- Mutations ---

    async def create_account(self, tenant_id: str, fields: AccountFields) -> AccountNode:
        """``POST /coa``. Fields are validated locally first."""
        fields.validate()
        response = await self._request(
            "POST", "/coa", tenant_id, headers=JSON_HEADERS, content=encode_body(fields.to_payload())
        )
        return self._parse(response, node_from_dict)

    async def update_account(
        self,
        tenant_id: str,
        account_id: str,
        payload: dict[str, Any],
    ) -> AccountNode:
        """``PUT /coa/{id}`` with a partial wire payload."""
        response = await self._request(
            "PUT", f"/coa/{account_id}", tenant_id, headers=JSON_HEADERS, content=encode_body(payload)
        )
        return self._parse(response, node_from_dict)

    async def delete_account(self, tenant_id: str, account_id: str) -> str:
        """``DELETE /coa/{id}``. Returns the server's confirmation message."""
        response = await self._request("DELETE", f"/coa/{account_id}", tenant_id)
        return self._message(response) or messages.DELETED

    # --- Bulk ---

    async def export_accounts(self, tenant_id: str) -> bytes:
        """``GET /coa/export``: the spreadsheet as raw bytes."""
        response = await self._request(
            "GET", "/coa/export", tenant_id, headers={"Accept": XLSX_CONTENT_TYPE}
        )
        return response.content

    async def import_accounts(self, tenant_id: str, filename: str, content: bytes) -> str:
        """``POST /coa/import`` as multipart with a ``file`` field.

        The spreadsheet is passed through untouched; the server parses it.
        """
        files = {"file": (filename, content, XLSX_CONTENT_TYPE)}
        response = await self._request("POST", "/coa/import", tenant_id, files=files)
        return self._message(response) or messages.IMPORTED

    # --- Ledger ---

    async def get_account_ledger(
        self,
        tenant_id: str,
        account_id: str,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
    ) -> AccountLedger:
        """``GET /coa/{id}/transactions`` for an optional date range."""
        response = await self._request(
            "GET",
            f"/coa/{account_id}/transactions",
            tenant_id,
            params=_date_params(start_date, end_date),
        )
        return self._parse(response, ledger_from_payload)

    async def get_account_balance(
        self,
        tenant_id: str,
        account_id: str,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
    ) -> AccountBalance:
        """``GET /coa/{id}/balance`` for an optional date range."""
        response = await self._request(
            "GET",
            f"/coa/{account_id}/balance",
            tenant_id,
            params=_date_params(start_date, end_date),
        )
        return self._parse(response, balance_from_payload)

    # --- Internals ---

    async def _request(
        self,
        method: str,
        path: str,
        tenant_id: str,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        if not tenant_id:
            raise ConfigurationError("tenant_id is required for every request")

        request_headers = {TENANT_HEADER: tenant_id, **(headers or {})}
        logger.debug("%s %s", method, path, extra={"tenant_id": tenant_id})
        try:
            response = await self._client.request(method, path, headers=request_headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e, extra={"tenant_id": tenant_id})
            raise NetworkError(messages.NETWORK_FAILED) from e

        if response.is_success:
            return response

        error = error_from_response(response, method)
        logger.warning(
            "%s %s -> %d: %s",
            method,
            path,
            response.status_code,
            error,
            extra={"tenant_id": tenant_id, "status_code": response.status_code},
        )
        raise error

    def _parse(self, response: httpx.Response, builder: Any) -> Any:
        try:
            return builder(decode_json(response))
        except (ValueError, KeyError, TypeError) as e:
            raise ServerError(f"Unexpected response from {response.request.url.path}: {e}") from e

    def _message(self, response: httpx.Response) -> str | None:
        if not response.content:
            return None
        try:
            return _extract_message(decode_json(response))
        except ValueError:
            return None


def decode_json(response: httpx.Response) -> Any:
    """Decode a JSON body with fractional numbers as ``Decimal``."""
    return json.loads(response.content, parse_float=Decimal)


def error_from_response(response: httpx.Response, method: str = "GET") -> ApiError:
    """Map a non-2xx response onto the exception taxonomy.

    Deleting an account the server refuses to remove (it has postings or
    sub-accounts) comes back as 400 or 409; both are ``ConflictError``.
    """
    status = response.status_code
    payload: Any = None
    try:
        payload = decode_json(response)
    except ValueError:
        pass

    message = _extract_message(payload)

    if status == 409 or (status == 400 and method.upper() == "DELETE"):
        return ConflictError(message, status)
    if status in (400, 422):
        field = payload.get("field") if isinstance(payload, dict) else None
        return ValidationError(message, status, field=field)
    if status == 404:
        return NotFoundError(message, status)
    return ServerError(message, status)


def _extract_message(payload: Any) -> str | None:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _date_params(
    start_date: date | datetime | None,
    end_date: date | datetime | None,
) -> dict[str, str]:
    params = {}
    if start_date is not None:
        params["startDate"] = start_date.isoformat()
    if end_date is not None:
        params["endDate"] = end_date.isoformat()
    return params
