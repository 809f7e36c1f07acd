"""Ledger models consumed by the per-account ledger view."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from coa_engine.models.account import AccountNode


@dataclass
class LedgerEntry:
    """One journal line posted to an account, with the running balance."""

    id: str
    description: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal
    journal_number: str
    journal_date: datetime

    @property
    def net(self) -> Decimal:
        return self.debit - self.credit


@dataclass
class AccountLedger:
    """Account header plus its entries for a date range."""

    account: AccountNode
    opening_balance: Decimal
    entries: list[LedgerEntry] = field(default_factory=list)

    @property
    def closing_balance(self) -> Decimal:
        """Running balance after the last entry (opening balance if none)."""
        if not self.entries:
            return self.opening_balance
        return self.entries[-1].running_balance

    @property
    def total_debit(self) -> Decimal:
        return sum((e.debit for e in self.entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((e.credit for e in self.entries), Decimal("0"))


@dataclass
class AccountBalance:
    """Aggregated debit/credit totals for an account over a period."""

    account_id: str
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal
