"""
pwaudio_lib/roundtrip.py

Session driver: enumerate audio devices and settings, then stop once every
request issued along the way has been answered.
"""

from __future__ import annotations

import logging

from .barrier import PendingSet, make_completion_handler
from .const import PW_ID_CORE
from .context import RoundtripClient, RoundtripContext
from .enumerator import make_global_remove_handler, make_registry_enumerator
from .states import ObjectStore

logger = logging.getLogger(__name__)


def roundtrip(client: RoundtripClient) -> ObjectStore:
    """
    Run one enumeration session on client and return the object store.

    Ordering matters:
    - get_registry is sent before the first barrier, so every global that
      exists now is announced before that barrier's done event.
    - The first barrier is requested (and tracked) before any listener is
      registered. Nothing is dispatched until run(), so its answer cannot be
      missed.

    Any failure (connect, bind, barrier request, daemon error) propagates.
    """
    client.connect()
    registry = client.get_registry()

    ctx = RoundtripContext(client=client, registry=registry, pending=PendingSet(on_empty=client.stop))
    ctx.track_barrier()

    client.on_barrier_reached(make_completion_handler(ctx.pending, core_id=PW_ID_CORE))
    registry_listeners = (
        registry.enumerate_globals(make_registry_enumerator(ctx)),
        registry.subscribe_global_remove(make_global_remove_handler(ctx)),
    )

    try:
        client.run()
    finally:
        ctx.teardown()
        for listener in registry_listeners:
            listener.remove()

    logger.info(
        "Roundtrip complete: %d device(s), settings %s",
        len(ctx.store.devices),
        "found" if ctx.settings_global_id is not None else "not found",
    )
    return ctx.store
