from __future__ import annotations

import time
from collections.abc import Callable

from ..models.notice import Notice, NoticeKind

"""User-facing message slots.

- success: transient (expires after ttl)
- delete_error: transient (expires after ttl)
- form_error: persistent until the next submit / import attempt
- page_error: persistent until the next successful refresh
"""

__all__ = ["NoticeBoard"]


class NoticeBoard:
    def __init__(self, ttl_seconds: float = 3.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._success: Notice | None = None
        self._delete_error: Notice | None = None
        self._form_error: Notice | None = None
        self._page_error: Notice | None = None

    def _transient(self, kind: NoticeKind, text: str) -> Notice:
        return Notice(kind=kind, text=text, expires_at=self._clock() + self.ttl_seconds)

    def _text(self, notice: Notice | None) -> str | None:
        if notice is None or not notice.is_active(self._clock()):
            return None
        return notice.text

    def flash_success(self, text: str) -> None:
        self._success = self._transient(NoticeKind.SUCCESS, text)

    def flash_delete_error(self, text: str) -> None:
        self._delete_error = self._transient(NoticeKind.ERROR, text)

    def set_form_error(self, text: str | None) -> None:
        self._form_error = Notice(NoticeKind.ERROR, text) if text else None

    def set_page_error(self, text: str | None) -> None:
        self._page_error = Notice(NoticeKind.ERROR, text) if text else None

    def clear_success(self) -> None:
        self._success = None

    @property
    def success(self) -> str | None:
        return self._text(self._success)

    @property
    def delete_error(self) -> str | None:
        return self._text(self._delete_error)

    @property
    def form_error(self) -> str | None:
        return self._text(self._form_error)

    @property
    def page_error(self) -> str | None:
        return self._text(self._page_error)

    def active(self) -> list[Notice]:
        now = self._clock()
        slots = (self._page_error, self._success, self._delete_error, self._form_error)
        return [n for n in slots if n is not None and n.is_active(now)]
