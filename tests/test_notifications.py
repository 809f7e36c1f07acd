"""Tests for notifiers."""

import logging

from coa_engine.models import ToastKind
from coa_engine.notifications import LoggingNotifier, RecordingNotifier


class TestRecordingNotifier:
    """Tests for RecordingNotifier."""

    def test_records_kinds(self) -> None:
        notifier = RecordingNotifier()
        notifier.success("Akun berhasil dibuat")
        notifier.error("Gagal menyimpan akun")

        assert notifier.successes == ["Akun berhasil dibuat"]
        assert notifier.errors == ["Gagal menyimpan akun"]
        assert notifier.messages() == ["Akun berhasil dibuat", "Gagal menyimpan akun"]

    def test_loading_and_dismiss(self) -> None:
        notifier = RecordingNotifier()
        first = notifier.loading("Mengekspor")
        second = notifier.loading("Mengimport")

        assert first != second
        assert [t.token for t in notifier.pending] == [first, second]

        notifier.dismiss(first)
        assert [t.token for t in notifier.pending] == [second]

        notifier.dismiss()
        assert notifier.pending == []
        assert notifier.messages(ToastKind.LOADING) == ["Mengekspor", "Mengimport"]

    def test_clear(self) -> None:
        notifier = RecordingNotifier()
        notifier.error("x")
        notifier.clear()
        assert notifier.toasts == []


class TestLoggingNotifier:
    """Tests for LoggingNotifier."""

    def test_logs_messages(self, caplog) -> None:
        caplog.set_level(logging.INFO, logger="coa_engine")
        notifier = LoggingNotifier()

        notifier.success("Akun berhasil dihapus")
        notifier.error("Gagal menghapus akun")
        token = notifier.loading("Mengekspor")

        assert token == 1
        assert "Akun berhasil dihapus" in caplog.text
        assert "Gagal menghapus akun" in caplog.text
        levels = [r.levelno for r in caplog.records]
        assert logging.WARNING in levels
