from __future__ import annotations

import itertools

import pytest

from pwaudio_lib.barrier import PendingSet, make_completion_handler


class _StopSpy:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


def test_single_token_completes_barrier() -> None:
    stop = _StopSpy()
    pending = PendingSet(on_empty=stop, tokens=[1])
    assert pending.complete(1) is True
    assert stop.calls == 1
    assert pending.is_empty


def test_unknown_token_is_ignored() -> None:
    stop = _StopSpy()
    pending = PendingSet(on_empty=stop, tokens=[1, 2])
    assert pending.complete(99) is False
    assert len(pending) == 2
    assert stop.calls == 0


def test_duplicate_completion_does_not_fire_twice() -> None:
    stop = _StopSpy()
    pending = PendingSet(on_empty=stop, tokens=[1])
    pending.complete(1)
    assert pending.complete(1) is False
    assert stop.calls == 1


def test_duplicate_track_raises() -> None:
    pending = PendingSet(on_empty=_StopSpy(), tokens=[1])
    with pytest.raises(ValueError):
        pending.track(1)


@pytest.mark.parametrize("order", list(itertools.permutations([10, 11, 12])))
def test_any_completion_order_stops_exactly_after_last(order) -> None:
    stop = _StopSpy()
    pending = PendingSet(on_empty=stop, tokens=[10, 11, 12])
    for token in order[:-1]:
        pending.complete(token)
        assert stop.calls == 0
    pending.complete(order[-1])
    assert stop.calls == 1


def test_tokens_tracked_during_completion_keep_barrier_open() -> None:
    stop = _StopSpy()
    pending = PendingSet(on_empty=stop, tokens=[1])
    pending.track(2)
    pending.complete(1)
    assert stop.calls == 0
    pending.track(3)
    pending.complete(3)
    assert stop.calls == 0
    pending.complete(2)
    assert stop.calls == 1


def test_completion_handler_filters_foreign_object_ids() -> None:
    stop = _StopSpy()
    pending = PendingSet(on_empty=stop, tokens=[5])
    handler = make_completion_handler(pending, core_id=0)

    handler(3, 5)
    assert 5 in pending
    assert stop.calls == 0

    handler(0, 5)
    assert stop.calls == 1
