from __future__ import annotations

from user_batch.models.notice import NoticeKind
from user_batch.services.notices import NoticeBoard


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_success_expires_after_ttl():
    clock = FakeClock()
    board = NoticeBoard(ttl_seconds=3.0, clock=clock)
    board.flash_success("Successfully imported 2 users")
    clock.now += 2.9
    assert board.success == "Successfully imported 2 users"
    clock.now += 0.1
    assert board.success is None


def test_delete_error_is_transient():
    clock = FakeClock()
    board = NoticeBoard(clock=clock)
    board.flash_delete_error("Failed to delete users")
    assert board.delete_error == "Failed to delete users"
    clock.now += 3.0
    assert board.delete_error is None


def test_form_and_page_errors_persist_until_cleared():
    clock = FakeClock()
    board = NoticeBoard(clock=clock)
    board.set_form_error("All fields are required")
    board.set_page_error("Failed to load users")
    clock.now += 3600
    assert board.form_error == "All fields are required"
    assert board.page_error == "Failed to load users"
    board.set_form_error(None)
    board.set_page_error(None)
    assert board.form_error is None and board.page_error is None


def test_new_success_restarts_the_timer():
    clock = FakeClock()
    board = NoticeBoard(clock=clock)
    board.flash_success("first")
    clock.now += 2.0
    board.flash_success("second")
    clock.now += 2.0
    assert board.success == "second"
    board.clear_success()
    assert board.success is None


def test_active_lists_live_notices_only():
    clock = FakeClock()
    board = NoticeBoard(ttl_seconds=1.0, clock=clock)
    board.flash_success("done")
    board.set_form_error("bad")
    clock.now += 1.5
    active = board.active()
    assert [n.text for n in active] == ["bad"]
    assert active[0].kind is NoticeKind.ERROR
