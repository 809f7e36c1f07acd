"""Synthetic account trees for tests, demos and benchmarks."""

from __future__ import annotations

from decimal import Decimal

from coa_engine.generators.base import BaseGenerator
from coa_engine.models import AccountNode, AccountType
from coa_engine.tree import iter_tree


class AccountTreeGenerator(BaseGenerator):
    """Generate chart-of-accounts trees shaped like an Indonesian SME's.

    Every tree starts from the five standard root headers (``1`` Aset to
    ``5`` Beban) and grows random sub-headers and leaves beneath them.
    Child codes extend the parent's code (``1`` > ``1-01`` > ``1-01-03``).
    Header balances are the sum of their children, as the API reports them.
    """

    ROOTS = [
        ("1", "Aset", AccountType.ASSET),
        ("2", "Liabilitas", AccountType.LIABILITY),
        ("3", "Ekuitas", AccountType.EQUITY),
        ("4", "Pendapatan", AccountType.REVENUE),
        ("5", "Beban", AccountType.EXPENSE),
    ]

    LEAF_NAMES = {
        AccountType.ASSET: [
            "Kas", "Kas Kecil", "Bank", "Piutang Usaha", "Persediaan",
            "Uang Muka", "Peralatan Kantor", "Kendaraan", "Bangunan",
        ],
        AccountType.LIABILITY: [
            "Utang Usaha", "Utang Gaji", "Utang Pajak", "Utang Bank",
            "Pendapatan Diterima di Muka",
        ],
        AccountType.EQUITY: ["Modal Disetor", "Laba Ditahan", "Prive", "Laba Tahun Berjalan"],
        AccountType.REVENUE: [
            "Penjualan", "Pendapatan Jasa", "Pendapatan Bunga", "Diskon Pembelian",
        ],
        AccountType.EXPENSE: [
            "Beban Gaji", "Beban Sewa", "Beban Listrik", "Beban Transportasi",
            "Beban Penyusutan", "Harga Pokok Penjualan",
        ],
    }

    HEADER_PREFIX = {
        AccountType.ASSET: "Aset",
        AccountType.LIABILITY: "Liabilitas",
        AccountType.EQUITY: "Ekuitas",
        AccountType.REVENUE: "Pendapatan",
        AccountType.EXPENSE: "Beban",
    }

    # Chance that a new child is itself a header (when depth allows)
    HEADER_RATE = 0.3

    def generate(self, num_accounts: int = 50, max_depth: int = 4) -> list[AccountNode]:
        """Generate a tree with exactly ``num_accounts`` accounts.

        Parameters
        ----------
        num_accounts : int
            Total accounts including the five root headers (minimum 5).
        max_depth : int
            Maximum number of levels (minimum 2).

        Returns
        -------
        list[AccountNode]
            The five roots.
        """
        if num_accounts < len(self.ROOTS):
            raise ValueError(f"num_accounts must be at least {len(self.ROOTS)}")
        if max_depth < 2:
            raise ValueError("max_depth must be at least 2")

        roots = [self._header(code, name, account_type, None, 1) for code, name, account_type in self.ROOTS]
        # Headers that can still take children
        open_headers = list(roots)

        for _ in range(num_accounts - len(roots)):
            parent = self.rng.choice(open_headers)
            child_level = parent.level + 1
            code = f"{parent.code}-{len(parent.children) + 1:02d}"

            if child_level < max_depth and self.rng.random() < self.HEADER_RATE:
                name = f"{self.HEADER_PREFIX[parent.account_type]} {self.fake.city()}"
                child = self._header(code, name, parent.account_type, parent.id, child_level)
                open_headers.append(child)
            else:
                child = self._leaf(code, parent, child_level)
            parent.children.append(child)

        self.roll_up(roots)
        return roots

    def deep_chain(self, depth: int, account_type: AccountType = AccountType.ASSET) -> list[AccountNode]:
        """A single root-to-leaf chain ``depth`` accounts long."""
        if depth < 1:
            raise ValueError("depth must be at least 1")

        root = self._header("1", "Aset", account_type, None, 1)
        current = root
        for level in range(2, depth):
            child = self._header(f"{current.code}-1", f"Sub {level}", account_type, current.id, level)
            current.children.append(child)
            current = child
        if depth > 1:
            current.children.append(self._leaf(f"{current.code}-1", current, depth))

        self.roll_up([root])
        return [root]

    @staticmethod
    def roll_up(roots: list[AccountNode]) -> None:
        """Set every header's balance to the sum of its children."""
        # Reverse pre-order visits children before their parents
        for node, _ in reversed(list(iter_tree(roots))):
            if node.is_header:
                node.balance = sum((child.balance for child in node.children), Decimal("0"))

    def _header(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        parent_id: str | None,
        level: int,
    ) -> AccountNode:
        return AccountNode(
            id=self.fake.uuid4(),
            code=code,
            name=name,
            account_type=account_type,
            is_header=True,
            parent_id=parent_id,
            level=level,
            normal_balance=account_type.normal_balance,
        )

    def _leaf(self, code: str, parent: AccountNode, level: int) -> AccountNode:
        base = self.rng.choice(self.LEAF_NAMES[parent.account_type])
        if self.rng.random() < 0.4:
            name = f"{base} {self.fake.company()}"
        else:
            name = base
        # Whole rupiah
        balance = Decimal(self.rng.randint(0, 500_000_000))
        return AccountNode(
            id=self.fake.uuid4(),
            code=code,
            name=name,
            account_type=parent.account_type,
            is_header=False,
            balance=balance,
            parent_id=parent.id,
            level=level,
            normal_balance=parent.account_type.normal_balance,
        )
