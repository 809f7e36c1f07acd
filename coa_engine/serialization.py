"""Mapping between API payloads and coa-engine models."""

import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from coa_engine.models import (
    AccountBalance,
    AccountLedger,
    AccountNode,
    AccountType,
    LedgerEntry,
    NormalBalance,
)

# Tree responses carry an aggregated ``totalBalance``; flat ones only the
# account's own ``saldoBerjalan``.
BALANCE_KEYS = ("balance", "totalBalance", "saldoBerjalan")


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number or numeric string to ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a monetary amount: {value!r}") from e


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, including a trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _account_from_dict(data: dict, parent_id: str | None) -> AccountNode:
    try:
        node_id = str(data["id"])
        code = str(data["kodeAkun"])
        name = str(data["namaAkun"])
        account_type = AccountType(data["tipe"])
    except KeyError as e:
        raise ValueError(f"Account payload missing key {e}") from e

    balance = Decimal("0")
    for key in BALANCE_KEYS:
        if data.get(key) is not None:
            balance = to_decimal(data[key])
            break

    normal_balance = data.get("normalBalance")
    return AccountNode(
        id=node_id,
        code=code,
        name=name,
        account_type=account_type,
        is_header=bool(data.get("isHeader", False)),
        balance=balance,
        parent_id=data.get("parentId", parent_id),
        level=data.get("level"),
        normal_balance=NormalBalance(normal_balance) if normal_balance else None,
        is_active=bool(data.get("isActive", True)),
    )


def node_from_dict(data: dict, parent_id: str | None = None) -> AccountNode:
    """Build an ``AccountNode`` (and its subtree) from an API object.

    Parameters
    ----------
    data : dict
        One element of ``GET /coa``.
    parent_id : str | None
        Structural parent id, used when the payload omits ``parentId``.

    Raises
    ------
    ValueError
        If a required key is missing or a value cannot be converted.
    """
    root = _account_from_dict(data, parent_id)
    stack = [(data, root)]
    while stack:
        raw, node = stack.pop()
        for child_data in raw.get("children") or []:
            child = _account_from_dict(child_data, node.id)
            node.children.append(child)
            stack.append((child_data, child))
    return root


def tree_from_payload(payload: Any) -> list[AccountNode]:
    """Build the root list from a ``GET /coa`` response body."""
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of accounts, got {type(payload).__name__}")
    return [node_from_dict(item) for item in payload]


def _account_to_dict(node: AccountNode) -> dict:
    result = {
        "id": node.id,
        "kodeAkun": node.code,
        "namaAkun": node.name,
        "tipe": node.account_type.value,
        "isHeader": node.is_header,
        "totalBalance": serialize_value(node.balance),
        "parentId": node.parent_id,
        "children": [],
    }
    if node.level is not None:
        result["level"] = node.level
    if node.normal_balance is not None:
        result["normalBalance"] = node.normal_balance.value
    return result


def node_to_dict(node: AccountNode) -> dict:
    """Serialize a node and its subtree back to the API shape."""
    root = _account_to_dict(node)
    stack = [(node, root)]
    while stack:
        current, data = stack.pop()
        for child in current.children:
            child_data = _account_to_dict(child)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return root


def ledger_from_payload(payload: dict) -> AccountLedger:
    """Build an ``AccountLedger`` from ``GET /coa/{id}/transactions``."""
    try:
        account_data = payload["account"]
        rows = payload.get("ledger") or []
    except (KeyError, TypeError) as e:
        raise ValueError("Ledger payload missing 'account'") from e

    entries = []
    for row in rows:
        journal = row.get("jurnal") or {}
        entries.append(
            LedgerEntry(
                id=str(row["id"]),
                description=row.get("deskripsi") or "",
                debit=to_decimal(row.get("debit")),
                credit=to_decimal(row.get("kredit")),
                running_balance=to_decimal(row.get("runningBalance")),
                journal_number=journal.get("nomorJurnal", ""),
                journal_date=parse_datetime(journal["tanggal"]),
            )
        )

    return AccountLedger(
        account=node_from_dict(account_data),
        opening_balance=to_decimal(account_data.get("saldoAwal")),
        entries=entries,
    )


def balance_from_payload(payload: dict) -> AccountBalance:
    """Build an ``AccountBalance`` from ``GET /coa/{id}/balance``."""
    try:
        return AccountBalance(
            account_id=str(payload["accountId"]),
            total_debit=to_decimal(payload.get("totalDebit")),
            total_credit=to_decimal(payload.get("totalKredit")),
            balance=to_decimal(payload.get("balance")),
        )
    except (KeyError, TypeError) as e:
        raise ValueError("Balance payload missing 'accountId'") from e


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output (sample files, logs).

    ``Decimal`` stays a string so amounts are never rounded through float.
    """
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def wire_value(value: Any) -> Any:
    """Prepare a value for an API request body.

    Amounts stay ``Decimal``; ``encode_body`` writes them as JSON numbers.
    """
    if isinstance(value, Decimal):
        return value
    return serialize_value(value)


def encode_body(payload: dict) -> bytes:
    """Encode a flat request body as JSON.

    ``Decimal`` values are written digit for digit as JSON numbers, never
    through ``float``.

    Raises
    ------
    ValueError
        If an amount is NaN or infinite.
    """
    parts = []
    for key, value in payload.items():
        if isinstance(value, Decimal):
            if not value.is_finite():
                raise ValueError(f"Not a finite amount: {value}")
            text = str(value)
        else:
            text = json.dumps(wire_value(value), ensure_ascii=False)
        parts.append(f"{json.dumps(str(key))}:{text}")
    return ("{" + ",".join(parts) + "}").encode("utf-8")
