"""Transient user notifications (toasts).

The engine never raises to its caller for request failures; it reports
them through a ``Notifier`` and keeps going.
"""

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from coa_engine.models import ToastKind

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Sink for user-visible messages."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def loading(self, message: str) -> int: ...

    def dismiss(self, token: int | None = None) -> None: ...


@dataclass
class Toast:
    """A notification as shown to the user."""

    token: int
    kind: ToastKind
    message: str
    created_at: datetime = field(default_factory=datetime.now)
    dismissed: bool = False


class LoggingNotifier:
    """Notifier that writes every toast to the log."""

    def __init__(self) -> None:
        self._tokens = itertools.count(1)

    def success(self, message: str) -> None:
        logger.info("toast success: %s", message)

    def error(self, message: str) -> None:
        logger.warning("toast error: %s", message)

    def loading(self, message: str) -> int:
        token = next(self._tokens)
        logger.info("toast loading [%d]: %s", token, message)
        return token

    def dismiss(self, token: int | None = None) -> None:
        logger.debug("toast dismiss [%s]", "all" if token is None else token)


class RecordingNotifier:
    """Notifier that keeps toasts in memory for a front-end to render."""

    def __init__(self) -> None:
        self.toasts: list[Toast] = []
        self._tokens = itertools.count(1)

    def _add(self, kind: ToastKind, message: str) -> Toast:
        toast = Toast(token=next(self._tokens), kind=kind, message=message)
        self.toasts.append(toast)
        return toast

    def success(self, message: str) -> None:
        self._add(ToastKind.SUCCESS, message)

    def error(self, message: str) -> None:
        self._add(ToastKind.ERROR, message)

    def loading(self, message: str) -> int:
        return self._add(ToastKind.LOADING, message).token

    def dismiss(self, token: int | None = None) -> None:
        """Dismiss one loading toast, or all of them when ``token`` is None."""
        for toast in self.toasts:
            if toast.kind == ToastKind.LOADING and (token is None or toast.token == token):
                toast.dismissed = True

    # --- Query helpers ---

    def messages(self, kind: ToastKind | None = None) -> list[str]:
        return [t.message for t in self.toasts if kind is None or t.kind == kind]

    @property
    def errors(self) -> list[str]:
        return self.messages(ToastKind.ERROR)

    @property
    def successes(self) -> list[str]:
        return self.messages(ToastKind.SUCCESS)

    @property
    def pending(self) -> list[Toast]:
        """Loading toasts still on screen."""
        return [t for t in self.toasts if t.kind == ToastKind.LOADING and not t.dismissed]

    def clear(self) -> None:
        self.toasts.clear()
