"""Account form sessions.

A session is the state behind the create/edit side sheet: what it was
opened for, the values to pre-fill, the parent accounts to offer, and
whether it is still open. A failed submit keeps the sheet open with the
values the user typed.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from coa_engine.models import AccountFields, AccountNode, AccountType, FormMode

if TYPE_CHECKING:
    from coa_engine.engine import CoaTreeEngine, MutationResult

TITLE_CREATE = "Tambah Akun Baru"
TITLE_EDIT = "Ubah Akun"


class AccountFormSession:
    """One opening of the account form.

    Parameters
    ----------
    engine : CoaTreeEngine
        Engine that performs the submit.
    mode : FormMode
        CREATE, CREATE_SUB (requires ``parent``) or EDIT (requires
        ``target``).
    parent : AccountNode | None
        Header the new sub-account goes under.
    target : AccountNode | None
        Account being edited.
    """

    def __init__(
        self,
        engine: CoaTreeEngine,
        mode: FormMode,
        parent: AccountNode | None = None,
        target: AccountNode | None = None,
    ) -> None:
        if mode == FormMode.CREATE_SUB and parent is None:
            raise ValueError("CREATE_SUB form needs a parent account")
        if mode == FormMode.EDIT and target is None:
            raise ValueError("EDIT form needs a target account")

        self.engine = engine
        self.mode = mode
        self.parent = parent
        self.target = target
        self.parents: list[AccountNode] = engine.parent_candidates(
            editing=target if mode == FormMode.EDIT else None
        )
        self.initial = self._initial_values()
        self.values: AccountFields = self.initial
        self.is_open = True
        self.submitting = False
        self.error: str | None = None

    @property
    def title(self) -> str:
        return TITLE_EDIT if self.mode == FormMode.EDIT else TITLE_CREATE

    @property
    def locked_type(self) -> AccountType | None:
        """Type the form must keep; sub-accounts follow their header."""
        if self.mode == FormMode.CREATE_SUB:
            return self.parent.account_type
        return None

    def _initial_values(self) -> AccountFields:
        if self.mode == FormMode.EDIT:
            return AccountFields.from_node(self.target)
        if self.mode == FormMode.CREATE_SUB:
            return AccountFields(
                code="",
                name="",
                account_type=self.parent.account_type,
                parent_id=self.parent.id,
            )
        return AccountFields(code="", name="")

    async def submit(self, fields: AccountFields) -> MutationResult:
        """Send the form. Closes the session only on success."""
        self.values = fields
        self.submitting = True
        try:
            if self.mode == FormMode.EDIT:
                result = await self.engine.edit_account(self.target, fields)
            elif self.mode == FormMode.CREATE_SUB:
                result = await self.engine.create_sub_account(self.parent, fields)
                # Show the type that was actually sent
                self.values = replace(
                    fields, account_type=self.parent.account_type, parent_id=self.parent.id
                )
            else:
                result = await self.engine.create_account(fields)
        finally:
            self.submitting = False

        if result.ok:
            self.is_open = False
            self.error = None
        else:
            self.error = result.message
        return result

    def close(self) -> None:
        self.is_open = False
