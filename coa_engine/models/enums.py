"""Enumeration types for chart-of-accounts entities."""

from enum import Enum


class NormalBalance(str, Enum):
    DEBIT = "DEBIT"
    KREDIT = "KREDIT"


class AccountType(str, Enum):
    """Top-level account category.

    Member names are English; values are the Indonesian wire values
    the API sends in ``tipe``.
    """

    ASSET = "ASET"
    LIABILITY = "LIABILITAS"
    EQUITY = "EKUITAS"
    REVENUE = "PENDAPATAN"
    EXPENSE = "BEBAN"

    @property
    def normal_balance(self) -> NormalBalance:
        """Side on which the account type increases."""
        if self in (AccountType.ASSET, AccountType.EXPENSE):
            return NormalBalance.DEBIT
        return NormalBalance.KREDIT


class FormMode(str, Enum):
    CREATE = "CREATE"
    CREATE_SUB = "CREATE_SUB"
    EDIT = "EDIT"


class ToastKind(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    LOADING = "LOADING"
