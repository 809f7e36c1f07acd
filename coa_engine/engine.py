"""Chart-of-accounts tree engine.

Holds one tenant's tree snapshot and mediates every read and write of it:

- ``refresh`` replaces the snapshot wholesale; a newer refresh cancels and
  supersedes an older one, so a slow stale response never overwrites a
  fresh one.
- Mutations go to the server, then await a full ``refresh`` before
  reporting success. The snapshot is never patched locally because header
  balances are server-side aggregates.
- Failures become notifications; nothing here raises for a request error.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from coa_engine import messages
from coa_engine.client import CoaClient
from coa_engine.config import EngineConfig
from coa_engine.exceptions import (
    ApiError,
    CoaEngineError,
    ConfigurationError,
    InvalidAccountStateError,
    ValidationError,
)
from coa_engine.models import AccountFields, AccountLedger, AccountNode, FormMode
from coa_engine.notifications import LoggingNotifier, Notifier
from coa_engine.tree import (
    descendant_ids,
    filter_tree,
    find_node,
    flatten_tree,
    parent_candidates,
    validate_tree,
)

if TYPE_CHECKING:
    from coa_engine.forms import AccountFormSession

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]


@dataclass
class MutationResult:
    """Outcome of a create, edit, delete or import."""

    ok: bool
    message: str
    account: AccountNode | None = None
    error: CoaEngineError | None = None
    cancelled: bool = False


@dataclass(frozen=True)
class EmptyState:
    """What to show when the visible tree has no rows."""

    title: str
    hint: str
    filtered: bool


def export_filename(day: date | None = None) -> str:
    """Default export file name, e.g. ``COA-2024-01-31.xlsx``."""
    return f"COA-{(day or date.today()).isoformat()}.xlsx"


class CoaTreeEngine:
    """In-memory chart-of-accounts tree for one tenant.

    Parameters
    ----------
    client : CoaClient
        REST boundary.
    tenant_id : str
        Company whose accounts this engine manages. Passed on every call.
    notifier : Notifier | None
        Where user-visible messages go (default: log them).
    export_dir : Path | str
        Directory for exports when no destination is given.
    """

    def __init__(
        self,
        client: CoaClient,
        tenant_id: str,
        notifier: Notifier | None = None,
        export_dir: Path | str = ".",
    ) -> None:
        if not tenant_id:
            raise ConfigurationError("CoaTreeEngine requires a tenant_id")
        self.client = client
        self.tenant_id = tenant_id
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.export_dir = Path(export_dir)

        self.tree: list[AccountNode] = []
        self.loading = False
        self.loaded = False
        self.last_error: CoaEngineError | None = None

        self._search = ""
        self._fetch_seq = 0
        self._fetch_task: asyncio.Task | None = None
        # Set whenever no fetch is pending
        self._idle = asyncio.Event()
        self._idle.set()

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        notifier: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> CoaTreeEngine:
        """Build a client and engine from configuration."""
        if not config.tenant_id:
            raise ConfigurationError("tenant_id is not configured (COA_TENANT_ID)")
        client = CoaClient(config.api, transport=transport)
        return cls(client, config.tenant_id, notifier=notifier, export_dir=config.export_dir)

    async def __aenter__(self) -> CoaTreeEngine:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Cancel any in-flight fetch and close the HTTP client."""
        self._fetch_seq += 1
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._idle.set()
        await self.client.aclose()

    # --- Views over the snapshot ---

    @property
    def search(self) -> str:
        return self._search

    @search.setter
    def search(self, query: str) -> None:
        self._search = query or ""

    @property
    def is_filtered(self) -> bool:
        return bool(self._search)

    @property
    def visible_tree(self) -> Sequence[AccountNode]:
        """Snapshot pruned by the current search."""
        return filter_tree(self.tree, self._search)

    @property
    def flat_accounts(self) -> list[AccountNode]:
        """Whole snapshot in pre-order, for pickers and lookups."""
        return flatten_tree(self.tree)

    def parent_candidates(self, editing: AccountNode | None = None) -> list[AccountNode]:
        """Header accounts the form may offer as parent."""
        return parent_candidates(self.tree, editing=editing)

    def find(self, account_id: str) -> AccountNode | None:
        return find_node(self.tree, account_id)

    def empty_state(self) -> EmptyState | None:
        """Empty-state copy, or None while loading or when rows exist."""
        if self.loading and not self.loaded:
            return None
        if self.visible_tree:
            return None
        if self.is_filtered:
            return EmptyState(messages.EMPTY_NO_MATCH, messages.EMPTY_NO_MATCH_HINT, True)
        return EmptyState(messages.EMPTY_NO_ACCOUNTS, messages.EMPTY_NO_ACCOUNTS_HINT, False)

    # --- Fetch ---

    async def refresh(self) -> bool:
        """Reload the whole tree from the server.

        Returns True when this call's response became the snapshot. A call
        superseded by a later ``refresh`` returns False without touching
        state. On failure the previous snapshot stays in place.
        """
        self._fetch_seq += 1
        seq = self._fetch_seq
        if self._fetch_task is not None and not self._fetch_task.done():
            logger.debug("Cancelling superseded fetch", extra={"tenant_id": self.tenant_id})
            self._fetch_task.cancel()

        task = asyncio.ensure_future(self.client.fetch_tree(self.tenant_id))
        self._fetch_task = task
        self.loading = True
        self._idle.clear()
        try:
            tree = await task
        except asyncio.CancelledError:
            if seq != self._fetch_seq:
                return False
            raise
        except CoaEngineError as e:
            if seq != self._fetch_seq:
                return False
            self.last_error = e
            self.notifier.error(messages.LOAD_FAILED)
            return False
        finally:
            if seq == self._fetch_seq:
                self.loading = False
                self._idle.set()

        if seq != self._fetch_seq:
            logger.debug("Discarding stale tree response %d", seq)
            return False

        self.tree = tree
        self.loaded = True
        self.last_error = None
        self._report_violations(tree)
        logger.debug("Loaded %d root accounts", len(tree), extra={"tenant_id": self.tenant_id})
        return True

    # --- Mutations ---

    async def create_account(self, fields: AccountFields) -> MutationResult:
        """Create an account, then reload the tree."""
        try:
            created = await self.client.create_account(self.tenant_id, fields)
        except CoaEngineError as e:
            return self._failed(e, messages.SAVE_FAILED)

        logger.info(
            "Created account %s",
            created.code,
            extra={"tenant_id": self.tenant_id, "account_id": created.id},
        )
        await self._reload()
        self.notifier.success(messages.CREATED)
        return MutationResult(True, messages.CREATED, account=created)

    async def create_sub_account(self, parent: AccountNode, fields: AccountFields) -> MutationResult:
        """Create an account under a header, inheriting the header's type."""
        if not parent.is_header:
            return self._failed(
                InvalidAccountStateError(messages.SUB_ACCOUNT_NEEDS_HEADER), messages.SAVE_FAILED
            )
        sub_fields = replace(fields, parent_id=parent.id, account_type=parent.account_type)
        return await self.create_account(sub_fields)

    async def edit_account(self, node: AccountNode, fields: AccountFields) -> MutationResult:
        """Update an account; a changed parent reshapes the tree on reload."""
        try:
            self._check_edit(node, fields)
            fields.validate()
        except CoaEngineError as e:
            return self._failed(e, messages.SAVE_FAILED)

        payload = fields.to_partial_payload(AccountFields.from_node(node))
        if not payload:
            logger.debug("Edit of %s changed nothing", node.code)
            self.notifier.success(messages.UPDATED)
            return MutationResult(True, messages.UPDATED, account=node)

        try:
            updated = await self.client.update_account(self.tenant_id, node.id, payload)
        except CoaEngineError as e:
            return self._failed(e, messages.SAVE_FAILED)

        logger.info(
            "Updated account %s (%s)",
            updated.code,
            ", ".join(sorted(payload)),
            extra={"tenant_id": self.tenant_id, "account_id": node.id},
        )
        await self._reload()
        self.notifier.success(messages.UPDATED)
        return MutationResult(True, messages.UPDATED, account=updated)

    async def delete_account(self, account_id: str, confirm: ConfirmCallback) -> MutationResult:
        """Delete an account after the user confirms.

        ``confirm`` receives the confirmation prompt and returns (or
        resolves to) True to proceed. The server refuses accounts with
        postings or sub-accounts; its reason is shown verbatim and the tree
        is left as it was.
        """
        answer = confirm(messages.CONFIRM_DELETE)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            return MutationResult(False, "", cancelled=True)

        try:
            message = await self.client.delete_account(self.tenant_id, account_id)
        except CoaEngineError as e:
            return self._failed(e, messages.DELETE_FAILED)

        logger.info(
            "Deleted account %s", account_id, extra={"tenant_id": self.tenant_id, "account_id": account_id}
        )
        await self._reload()
        self.notifier.success(message)
        return MutationResult(True, message)

    # --- Bulk ---

    async def export_accounts(self, destination: Path | str | None = None) -> Path | None:
        """Download the spreadsheet export and save it.

        ``destination`` may be a file path or a directory (default
        ``export_dir``); directories get ``COA-<today>.xlsx``. Returns the
        written path, or None on failure.
        """
        token = self.notifier.loading(messages.EXPORTING)
        try:
            content = await self.client.export_accounts(self.tenant_id)
            path = self._export_path(destination)
            path.write_bytes(content)
        except CoaEngineError as e:
            self.notifier.dismiss(token)
            self._failed(e, messages.EXPORT_FAILED)
            return None
        except OSError as e:
            self.notifier.dismiss(token)
            logger.warning("Export could not be written: %s", e)
            self.notifier.error(messages.EXPORT_FAILED)
            return None

        self.notifier.dismiss(token)
        self.notifier.success(messages.EXPORTED)
        logger.info("Exported %d bytes to %s", len(content), path)
        return path

    async def import_accounts(self, source: Path | str) -> MutationResult:
        """Upload a spreadsheet for server-side bulk import, then reload."""
        path = Path(source)
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.warning("Import file unreadable: %s", e)
            self.notifier.error(messages.IMPORT_FAILED)
            return MutationResult(False, messages.IMPORT_FAILED)

        token = self.notifier.loading(messages.IMPORTING)
        try:
            message = await self.client.import_accounts(self.tenant_id, path.name, content)
        except CoaEngineError as e:
            self.notifier.dismiss(token)
            return self._failed(e, messages.IMPORT_FAILED)

        self.notifier.dismiss(token)
        logger.info("Imported %s", path.name, extra={"tenant_id": self.tenant_id})
        await self._reload()
        self.notifier.success(message)
        return MutationResult(True, message)

    # --- Ledger ---

    async def account_ledger(
        self,
        account_id: str,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
    ) -> AccountLedger | None:
        """Ledger for one account, or None (with a notification) on failure."""
        try:
            return await self.client.get_account_ledger(
                self.tenant_id, account_id, start_date, end_date
            )
        except CoaEngineError as e:
            self._failed(e, messages.LEDGER_FAILED)
            return None

    # --- Forms ---

    def open_create_form(self) -> AccountFormSession:
        from coa_engine.forms import AccountFormSession

        return AccountFormSession(self, FormMode.CREATE)

    def open_create_sub_form(self, parent: AccountNode) -> AccountFormSession | None:
        """Form pre-filled with ``parent``; None (with a message) for leaves."""
        from coa_engine.forms import AccountFormSession

        if not parent.is_header:
            self.notifier.error(messages.SUB_ACCOUNT_NEEDS_HEADER)
            return None
        return AccountFormSession(self, FormMode.CREATE_SUB, parent=parent)

    def open_edit_form(self, node: AccountNode) -> AccountFormSession:
        from coa_engine.forms import AccountFormSession

        return AccountFormSession(self, FormMode.EDIT, target=node)

    # --- Internals ---

    def _check_edit(self, node: AccountNode, fields: AccountFields) -> None:
        current = self.find(node.id) or node
        if not fields.is_header and current.children:
            raise ValidationError(messages.LEAF_HAS_CHILDREN, field="is_header")

        parent_id = fields.parent_id
        if parent_id is None:
            return
        if parent_id == node.id:
            raise ValidationError(messages.PARENT_IS_SELF, field="parent_id")
        if parent_id in descendant_ids(current):
            raise ValidationError(messages.PARENT_IS_DESCENDANT, field="parent_id")
        parent = self.find(parent_id)
        if parent is not None and not parent.is_header:
            raise ValidationError(messages.PARENT_NOT_HEADER, field="parent_id")

    async def _reload(self) -> None:
        """Refresh, then wait out any newer refresh that superseded it."""
        await self.refresh()
        await self._idle.wait()

    def _report_violations(self, tree: list[AccountNode]) -> None:
        violations = validate_tree(tree)
        if violations:
            logger.warning(
                "Loaded tree breaks %d invariant(s): %s",
                len(violations),
                "; ".join(str(v) for v in violations[:5]),
                extra={"tenant_id": self.tenant_id},
            )

    def _failed(self, error: CoaEngineError, fallback: str) -> MutationResult:
        if isinstance(error, ApiError):
            message = error.message or fallback
        else:
            message = str(error) or fallback
        logger.warning(
            "%s: %s (%s)",
            fallback,
            message,
            type(error).__name__,
            extra={"tenant_id": self.tenant_id},
        )
        self.notifier.error(message)
        return MutationResult(False, message, error=error)

    def _export_path(self, destination: Path | str | None) -> Path:
        if destination is None:
            target = self.export_dir
        else:
            target = Path(destination)
        if target.is_dir():
            return target / export_filename()
        return target
