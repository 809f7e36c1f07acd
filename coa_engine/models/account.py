"""Account models for the chart of accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from coa_engine.exceptions import ValidationError
from coa_engine.models.enums import AccountType, NormalBalance


@dataclass
class AccountNode:
    """One account in the chart-of-accounts tree.

    Header accounts (``is_header=True``) group sub-accounts and take no
    postings. Leaf accounts take postings and never have children.

    The tree shape comes from ``children`` as sent by the server; ``code``
    usually mirrors nesting (``1`` > ``1-1`` > ``1-1000``) but is never
    parsed to infer it.
    """

    id: str
    code: str
    name: str
    account_type: AccountType
    is_header: bool
    balance: Decimal = Decimal("0")
    parent_id: str | None = None
    children: list[AccountNode] = field(default_factory=list)
    level: int | None = None  # 1 for roots, as stored server-side
    normal_balance: NormalBalance | None = None
    is_active: bool = True

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_leaf(self) -> bool:
        return not self.is_header

    def label(self) -> str:
        """Picker label, e.g. ``1-1000 - Kas``."""
        return f"{self.code} - {self.name}"


@dataclass
class AccountFields:
    """Values submitted from the account form.

    ``to_payload`` produces the body for ``POST /coa``; edits send the
    subset returned by ``to_partial_payload``.
    """

    code: str
    name: str
    account_type: AccountType = AccountType.ASSET
    is_header: bool = False
    parent_id: str | None = None
    normal_balance: NormalBalance | None = None
    is_active: bool = True
    allow_manual_entry: bool = True
    opening_balance: Decimal = Decimal("0")
    notes: str | None = None

    # Wire name for each attribute
    WIRE_NAMES = {
        "code": "kodeAkun",
        "name": "namaAkun",
        "account_type": "tipe",
        "is_header": "isHeader",
        "parent_id": "parentId",
        "normal_balance": "normalBalance",
        "is_active": "isActive",
        "allow_manual_entry": "allowManualEntry",
        "opening_balance": "saldoAwal",
        "notes": "catatan",
    }

    @classmethod
    def from_node(cls, node: AccountNode) -> AccountFields:
        """Pre-fill form values from an existing account."""
        return cls(
            code=node.code,
            name=node.name,
            account_type=node.account_type,
            is_header=node.is_header,
            parent_id=node.parent_id,
            normal_balance=node.normal_balance,
            is_active=node.is_active,
        )

    def validate(self) -> None:
        """Check the fields the server would reject outright.

        Raises
        ------
        ValidationError
            If a required field is blank or a value has the wrong type.
        """
        if not self.code or not self.code.strip():
            raise ValidationError("Kode akun wajib diisi", field="code")
        if not self.name or not self.name.strip():
            raise ValidationError("Nama akun wajib diisi", field="name")
        if not isinstance(self.account_type, AccountType):
            try:
                self.account_type = AccountType(self.account_type)
            except ValueError as e:
                raise ValidationError(
                    f"Tipe akun tidak dikenal: {self.account_type}", field="account_type"
                ) from e
        if not isinstance(self.opening_balance, Decimal):
            try:
                self.opening_balance = Decimal(str(self.opening_balance))
            except InvalidOperation as e:
                raise ValidationError(
                    f"Saldo awal tidak valid: {self.opening_balance}", field="opening_balance"
                ) from e
        if not self.opening_balance.is_finite():
            raise ValidationError(
                f"Saldo awal tidak valid: {self.opening_balance}", field="opening_balance"
            )

    def effective_normal_balance(self) -> NormalBalance:
        return self.normal_balance or AccountType(self.account_type).normal_balance

    def to_payload(self) -> dict:
        """Full create body."""
        from coa_engine.serialization import wire_value

        payload = {
            "kodeAkun": self.code.strip(),
            "namaAkun": self.name.strip(),
            "tipe": wire_value(self.account_type),
            "isHeader": self.is_header,
            "normalBalance": wire_value(self.effective_normal_balance()),
            "isActive": self.is_active,
            "allowManualEntry": self.allow_manual_entry,
            "saldoAwal": wire_value(self.opening_balance),
        }
        if self.parent_id is not None:
            payload["parentId"] = self.parent_id
        if self.notes:
            payload["catatan"] = self.notes
        return payload

    def to_partial_payload(self, original: AccountFields | None = None) -> dict:
        """Edit body: only fields that differ from ``original``.

        ``parentId`` is always sent explicitly (``None`` moves the account
        to the root) when it changed.
        """
        from coa_engine.serialization import wire_value

        if original is None:
            return self.to_payload()

        payload = {}
        for attr, wire in self.WIRE_NAMES.items():
            new = getattr(self, attr)
            old = getattr(original, attr)
            if attr == "normal_balance":
                new, old = self.effective_normal_balance(), original.effective_normal_balance()
            if isinstance(new, str) and attr in ("code", "name"):
                new = new.strip()
            if new != old:
                payload[wire] = wire_value(new)
        return payload
