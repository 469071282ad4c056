"""
pwaudio_lib/barrier.py

Completion barrier over a dynamically growing set of outstanding requests.

Each barrier request returns a token; the daemon later echoes it in a done
event. The barrier is reached when the set of tracked tokens becomes empty,
whatever order the completions arrive in.

track() must be called before control returns to the dispatch loop for the
event that issued the request. With single-threaded dispatch that holds as
long as the caller tracks the token inside the same callback; otherwise the
completion could be processed first and the barrier would never be reached.
"""

from __future__ import annotations

import logging
from typing import Callable, Hashable, Iterable

logger = logging.getLogger(__name__)

Token = Hashable


class PendingSet:
    def __init__(self, on_empty: Callable[[], None], tokens: Iterable[Token] = ()) -> None:
        self._on_empty = on_empty
        self._pending: set[Token] = set()
        for token in tokens:
            self.track(token)

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, token: object) -> bool:
        return token in self._pending

    @property
    def is_empty(self) -> bool:
        return not self._pending

    def pending(self) -> frozenset[Token]:
        return frozenset(self._pending)

    def track(self, token: Token) -> None:
        if token in self._pending:
            raise ValueError(f"token {token!r} is already pending")
        self._pending.add(token)
        logger.debug("Barrier tracking token=%r (pending=%d)", token, len(self._pending))

    def complete(self, token: Token) -> bool:
        """
        Remove token. Unknown or already-removed tokens are ignored.

        Returns True if the token was pending. Calls on_empty when this
        removal leaves the set empty.
        """
        if token not in self._pending:
            logger.debug("Ignoring completion for untracked token=%r", token)
            return False
        self._pending.remove(token)
        logger.debug("Barrier completed token=%r (pending=%d)", token, len(self._pending))
        if not self._pending:
            self._on_empty()
        return True


def make_completion_handler(
    pending: PendingSet,
    *,
    core_id: int,
) -> Callable[[int, Token], None]:
    """
    Handler for barrier-reached events: (object id, token).

    Events for objects other than core_id belong to someone else's sync and
    are ignored.
    """

    def handler_barrier_reached(obj_id: int, token: Token) -> None:
        if obj_id != core_id:
            return
        pending.complete(token)

    return handler_barrier_reached
