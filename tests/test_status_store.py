"""Tests for the status store."""

from photo_status.domain.status import Status
from photo_status.services.status_store import StatusStore


def test_set_status_tracks_polling_membership() -> None:
    store = StatusStore()

    assert store.set_status(1, Status.PROCESSING)
    assert 1 in store.active_poll

    assert store.set_status(1, Status.DONE)
    assert 1 not in store.active_poll
    assert store.status_of(1) is Status.DONE


def test_set_status_reports_unchanged_value() -> None:
    store = StatusStore()
    store.set_status(1, Status.FAILED)

    assert not store.set_status(1, Status.FAILED)


def test_forget_removes_every_trace() -> None:
    store = StatusStore()
    store.set_status(2, Status.PROCESSING)
    store.ensure_meta(2).last_error = "boom"

    store.forget(2)

    assert store.status_of(2) is Status.UNKNOWN
    assert not store.tracks(2)
    assert 2 not in store.active_poll


def test_snapshot_is_a_copy() -> None:
    store = StatusStore()
    store.set_status(3, Status.PROCESSING)
    store.set_status(1, Status.PROCESSING)
    store.ensure_meta(3).last_error = "timeout"

    snapshot = store.snapshot()
    store.set_status(3, Status.DONE)

    assert snapshot.statuses == {3: Status.PROCESSING, 1: Status.PROCESSING}
    assert snapshot.processing == (1, 3)
    assert snapshot.last_errors == {3: "timeout"}
