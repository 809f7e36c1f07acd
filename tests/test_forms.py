"""Tests for account form sessions."""

import pytest

from coa_engine import messages
from coa_engine.forms import TITLE_CREATE, TITLE_EDIT, AccountFormSession
from coa_engine.models import AccountFields, AccountType, FormMode


def loaded_engine(make_engine, run):
    async def scenario():
        engine = make_engine()
        await engine.refresh()
        await engine.client.aclose()
        return engine

    return run(scenario())


class TestOpening:
    """Tests for opening forms from the engine."""

    def test_create_form(self, make_engine, run) -> None:
        engine = loaded_engine(make_engine, run)

        form = engine.open_create_form()

        assert form.mode == FormMode.CREATE
        assert form.title == TITLE_CREATE
        assert form.is_open
        assert form.values.code == ""
        assert form.locked_type is None
        assert [p.id for p in form.parents] == ["acc-1"]

    def test_create_sub_form_prefills_parent(self, make_engine, run) -> None:
        engine = loaded_engine(make_engine, run)

        form = engine.open_create_sub_form(engine.find("acc-1"))

        assert form.mode == FormMode.CREATE_SUB
        assert form.values.parent_id == "acc-1"
        assert form.values.account_type is AccountType.ASSET
        assert form.locked_type is AccountType.ASSET

    def test_create_sub_form_on_leaf(self, make_engine, run) -> None:
        engine = loaded_engine(make_engine, run)

        assert engine.open_create_sub_form(engine.find("acc-2")) is None
        assert engine.notifier.errors == [messages.SUB_ACCOUNT_NEEDS_HEADER]

    def test_edit_form(self, make_engine, run) -> None:
        engine = loaded_engine(make_engine, run)

        form = engine.open_edit_form(engine.find("acc-1"))

        assert form.title == TITLE_EDIT
        assert form.values.code == "1"
        assert form.values.is_header is True
        # An account can never be its own parent
        assert form.parents == []

    @pytest.mark.parametrize("mode", [FormMode.CREATE_SUB, FormMode.EDIT])
    def test_missing_anchor(self, make_engine, run, mode: FormMode) -> None:
        engine = loaded_engine(make_engine, run)

        with pytest.raises(ValueError):
            AccountFormSession(engine, mode)


class TestSubmit:
    """Tests for submitting forms."""

    def test_success_closes(self, server, make_engine, run) -> None:
        async def scenario():
            async with make_engine() as engine:
                await engine.refresh()
                form = engine.open_create_form()
                result = await form.submit(AccountFields(code="2", name="Liabilitas",
                                                         account_type=AccountType.LIABILITY, is_header=True))
                return form, result

        form, result = run(scenario())

        assert result.ok is True
        assert form.is_open is False
        assert form.error is None
        assert form.submitting is False

    def test_failure_keeps_values(self, server, make_engine, run) -> None:
        typed = AccountFields(code="1-1", name="Kas Duplikat")

        async def scenario():
            async with make_engine() as engine:
                await engine.refresh()
                form = engine.open_create_form()
                result = await form.submit(typed)
                return form, result

        form, result = run(scenario())

        assert result.ok is False
        assert form.is_open is True
        assert form.error == "Kode akun sudah digunakan"
        assert form.values is typed
        assert form.submitting is False

    def test_sub_form_forces_parent_type(self, server, make_engine, run) -> None:
        async def scenario():
            async with make_engine() as engine:
                await engine.refresh()
                form = engine.open_create_sub_form(engine.find("acc-1"))
                await form.submit(AccountFields(code="1-2", name="Bank", account_type=AccountType.REVENUE))
                return form

        form = run(scenario())

        assert form.values.account_type is AccountType.ASSET
        assert form.values.parent_id == "acc-1"
        assert server.accounts["acc-3"]["tipe"] == "ASET"

    def test_edit_submit(self, server, make_engine, run) -> None:
        async def scenario():
            async with make_engine() as engine:
                await engine.refresh()
                form = engine.open_edit_form(engine.find("acc-2"))
                values = AccountFields.from_node(form.target)
                values.name = "Kas Besar"
                await form.submit(values)
                return form, engine

        form, engine = run(scenario())

        assert form.is_open is False
        assert engine.find("acc-2").name == "Kas Besar"

    def test_close(self, make_engine, run) -> None:
        form = loaded_engine(make_engine, run).open_create_form()
        form.close()
        assert form.is_open is False
