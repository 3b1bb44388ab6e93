import asyncio
import json
from unittest.mock import create_autospec

import pytest

from cart.schemas import LineItem
from cart.writer import SnapshotWriter
from core.logging import stub_logger
from gateways.db import InMemoryStorage
from gateways.db.exceptions import StorageTimeoutError
from tests.utils import SlowStorage, product_data

KEY = "writer:test"


def cart_of(*quantities: int) -> tuple[LineItem, ...]:
    return tuple(
        LineItem(**product_data(f"p{i}"), quantity=qty)
        for i, qty in enumerate(quantities)
    )


@pytest.mark.asyncio
async def test_writes_follow_scheduling_order():
    storage = SlowStorage(delays=[0.03, 0.01, 0])
    writer = SnapshotWriter(storage, KEY, stub_logger)
    futures = [writer.schedule(cart_of(*range(1, n + 1))) for n in (1, 2, 3)]
    assert writer.pending_count == 3
    assert await asyncio.gather(*futures) == [True, True, True]
    assert [len(json.loads(w)) for w in storage.writes] == [1, 2, 3]
    assert writer.last_written_seq == 3
    assert writer.pending_count == 0


@pytest.mark.asyncio
async def test_failed_write_is_not_retried():
    backend = create_autospec(InMemoryStorage, instance=True)
    backend.set.side_effect = [StorageTimeoutError("timeout"), None]
    writer = SnapshotWriter(backend, KEY, stub_logger)
    first = writer.schedule(cart_of(1))
    second = writer.schedule(cart_of(2))
    assert (await first, await second) == (False, True)
    assert backend.set.await_count == 2
    assert writer.last_written_seq == 2


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_write():
    storage = SlowStorage(delays=[0.05])
    writer = SnapshotWriter(storage, KEY, stub_logger)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(writer.schedule(cart_of(4)), 0.001)
    await writer.flush()
    assert json.loads(storage._data[KEY])[0]["quantity"] == 4


@pytest.mark.asyncio
async def test_worker_restarts_after_aclose():
    storage = InMemoryStorage()
    writer = SnapshotWriter(storage, KEY, stub_logger)
    await writer.schedule(cart_of(1))
    await writer.aclose()
    assert await writer.schedule(cart_of(2)) is True
    assert json.loads(storage._data[KEY])[0]["quantity"] == 2
    await writer.aclose()
