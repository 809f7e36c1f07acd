"""Pytest configuration and fixtures."""

import asyncio
import json
from collections.abc import Callable
from decimal import Decimal
from typing import Any

import httpx
import pytest

from coa_engine.client import TENANT_HEADER, CoaClient
from coa_engine.config import ApiConfig
from coa_engine.engine import CoaTreeEngine
from coa_engine.models import AccountNode, AccountType
from coa_engine.notifications import RecordingNotifier

BASE_URL = "http://testserver/api"
TENANT = "pt-maju-jaya"


def make_account(
    id: str,
    code: str,
    name: str,
    is_header: bool = False,
    account_type: AccountType = AccountType.ASSET,
    children: list[AccountNode] | None = None,
    parent_id: str | None = None,
    balance: str = "0",
) -> AccountNode:
    """Build an AccountNode, wiring ``parent_id`` on the given children."""
    children = children or []
    for child in children:
        child.parent_id = id
    return AccountNode(
        id=id,
        code=code,
        name=name,
        account_type=account_type,
        is_header=is_header,
        balance=Decimal(balance),
        parent_id=parent_id,
        children=children,
    )


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def tenant_id() -> str:
    return TENANT


@pytest.fixture
def scenario_tree() -> list[AccountNode]:
    """Aset header with a single Kas leaf."""
    return [
        make_account(
            "a1", "1", "Aset", is_header=True,
            children=[make_account("a2", "1-1", "Kas", balance="1500000")],
        )
    ]


@pytest.fixture
def sample_tree() -> list[AccountNode]:
    """Two roots, three levels, mixed headers and leaves.

    1 Aset
      1-1 Aset Lancar
        1-1000 Kas
        1-1100 Bank BCA
      1-2 Aset Tetap
        1-2000 Kendaraan
    5 Beban
      5-1000 Beban Gaji
      5-2 Beban Operasional   (header, no children)
    """
    return [
        make_account(
            "h1", "1", "Aset", is_header=True,
            children=[
                make_account(
                    "h11", "1-1", "Aset Lancar", is_header=True,
                    children=[
                        make_account("l1", "1-1000", "Kas", balance="2500000"),
                        make_account("l2", "1-1100", "Bank BCA", balance="10000000.50"),
                    ],
                ),
                make_account(
                    "h12", "1-2", "Aset Tetap", is_header=True,
                    children=[make_account("l3", "1-2000", "Kendaraan", balance="150000000")],
                ),
            ],
        ),
        make_account(
            "h5", "5", "Beban", is_header=True, account_type=AccountType.EXPENSE,
            children=[
                make_account("l5", "5-1000", "Beban Gaji", account_type=AccountType.EXPENSE),
                make_account("h52", "5-2", "Beban Operasional", is_header=True,
                             account_type=AccountType.EXPENSE),
            ],
        ),
    ]


class FakeCoaServer:
    """In-memory stand-in for the ``/coa`` API, served via MockTransport.

    Accounts are stored flat in wire format; ``GET /coa`` nests them and
    rolls leaf balances up into headers like the real server.
    """

    def __init__(self, tenant_id: str = TENANT) -> None:
        self.tenant_id = tenant_id
        self.accounts: dict[str, dict[str, Any]] = {}
        self.postings: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], httpx.Response] = {}
        self.delay = 0.0
        self.export_bytes = b"PK\x03\x04fake-xlsx"
        self._next_id = 1

    # --- Setup helpers ---

    def add(
        self,
        code: str,
        name: str,
        tipe: str = "ASET",
        is_header: bool = False,
        parent_id: str | None = None,
        balance: Any = 0,
    ) -> str:
        account_id = f"acc-{self._next_id}"
        self._next_id += 1
        self.accounts[account_id] = {
            "id": account_id,
            "kodeAkun": code,
            "namaAkun": name,
            "tipe": tipe,
            "isHeader": is_header,
            "parentId": parent_id,
            "saldoBerjalan": balance,
        }
        return account_id

    def fail(self, method: str, path: str, status: int, message: str | None = None) -> None:
        """Make the next ``method path`` request fail once."""
        body = {"message": message} if message else {}
        self.failures[(method, path)] = httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str | None = None) -> list[str]:
        return [
            f"{r.method} {r.url.path}" for r in self.requests if method is None or r.method == method
        ]

    # --- Request handling ---

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        if request.headers.get(TENANT_HEADER) != self.tenant_id:
            return httpx.Response(403, json={"message": "Akses ditolak"})

        path = request.url.path.removeprefix("/api")
        failure = self.failures.pop((request.method, path), None)
        if failure is not None:
            return failure

        parts = [p for p in path.split("/") if p]
        if parts == ["coa"] and request.method == "GET":
            if request.url.params.get("flatten") == "true":
                rows = sorted(self.accounts.values(), key=lambda a: a["kodeAkun"])
                return httpx.Response(200, json=rows)
            return httpx.Response(200, json=self.tree())
        if parts == ["coa"] and request.method == "POST":
            return self._create(json.loads(request.content))
        if parts == ["coa", "export"]:
            return httpx.Response(200, content=self.export_bytes)
        if parts == ["coa", "import"]:
            return self._import(request)
        if len(parts) == 2:
            account_id = parts[1]
            if account_id not in self.accounts:
                return httpx.Response(404, json={"message": "Akun tidak ditemukan"})
            if request.method == "GET":
                return httpx.Response(200, json=self.accounts[account_id])
            if request.method == "PUT":
                self.accounts[account_id].update(json.loads(request.content))
                return httpx.Response(200, json=self.accounts[account_id])
            if request.method == "DELETE":
                return self._delete(account_id)
        return httpx.Response(405, json={"message": "Method not allowed"})

    def tree(self) -> list[dict[str, Any]]:
        nodes = {
            account_id: {**data, "children": [], "totalBalance": data["saldoBerjalan"]}
            for account_id, data in self.accounts.items()
        }
        roots = []
        for node in sorted(nodes.values(), key=lambda n: n["kodeAkun"]):
            parent = nodes.get(node["parentId"]) if node["parentId"] else None
            if parent is None:
                roots.append(node)
            else:
                parent["children"].append(node)

        def roll_up(node: dict[str, Any]) -> Any:
            for child in node["children"]:
                node["totalBalance"] += roll_up(child)
            return node["totalBalance"]

        for root in roots:
            roll_up(root)
        return roots

    def _create(self, body: dict[str, Any]) -> httpx.Response:
        if not body.get("kodeAkun"):
            return httpx.Response(400, json={"message": "Kode akun wajib diisi"})
        if any(a["kodeAkun"] == body["kodeAkun"] for a in self.accounts.values()):
            return httpx.Response(400, json={"message": "Kode akun sudah digunakan"})
        account_id = self.add(
            body["kodeAkun"],
            body["namaAkun"],
            body["tipe"],
            body.get("isHeader", False),
            body.get("parentId"),
            body.get("saldoAwal", 0),
        )
        return httpx.Response(201, json=self.accounts[account_id])

    def _delete(self, account_id: str) -> httpx.Response:
        if account_id in self.postings:
            return httpx.Response(
                400, json={"message": "Akun tidak dapat dihapus karena sudah memiliki transaksi"}
            )
        if any(a["parentId"] == account_id for a in self.accounts.values()):
            return httpx.Response(
                409, json={"message": "Akun tidak dapat dihapus karena memiliki sub-akun"}
            )
        del self.accounts[account_id]
        return httpx.Response(200, json={"message": "Akun berhasil dihapus"})

    def _import(self, request: httpx.Request) -> httpx.Response:
        content_type = request.headers.get("content-type", "")
        if not content_type.startswith("multipart/form-data") or b'name="file"' not in request.content:
            return httpx.Response(400, json={"message": "File wajib diunggah"})
        self.add("9-9999", "Akun Impor", "BEBAN")
        return httpx.Response(200, json={"message": "Import selesai: 1 akun ditambahkan"})


@pytest.fixture
def server() -> FakeCoaServer:
    """Fake API preloaded with the header/leaf scenario (1 Aset > 1-1 Kas)."""
    fake = FakeCoaServer()
    aset = fake.add("1", "Aset", is_header=True)
    fake.add("1-1", "Kas", parent_id=aset, balance=1500000)
    return fake


@pytest.fixture
def run() -> Callable:
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def make_engine(server: FakeCoaServer, tmp_path) -> Callable[..., CoaTreeEngine]:
    """Factory for engines wired to the fake server.

    Call it inside the coroutine under test so the HTTP client lives on
    the running loop.
    """

    def factory(notifier: RecordingNotifier | None = None) -> CoaTreeEngine:
        client = CoaClient(ApiConfig(base_url=BASE_URL), transport=server.transport())
        return CoaTreeEngine(
            client,
            server.tenant_id,
            notifier=notifier or RecordingNotifier(),
            export_dir=tmp_path,
        )

    return factory


@pytest.fixture
def node_factory() -> Callable[..., AccountNode]:
    """The ``make_account`` builder, for tests that shape their own trees."""
    return make_account
