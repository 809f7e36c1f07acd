"""Domain models for the chart of accounts."""

from coa_engine.models.account import AccountFields, AccountNode
from coa_engine.models.enums import AccountType, FormMode, NormalBalance, ToastKind
from coa_engine.models.ledger import AccountBalance, AccountLedger, LedgerEntry

__all__ = [
    "AccountBalance",
    "AccountFields",
    "AccountLedger",
    "AccountNode",
    "AccountType",
    "FormMode",
    "LedgerEntry",
    "NormalBalance",
    "ToastKind",
]
