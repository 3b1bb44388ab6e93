import asyncio
from contextlib import suppress
from dataclasses import dataclass

from cart.domain.interfaces import Cart, PersistenceBackendI
from cart.schemas import CartSnapshot
from core.logging import AbstractLogger


@dataclass
class _WriteRequest:
    seq: int
    items: Cart
    done: asyncio.Future[bool]


class SnapshotWriter:
    """Single writer of cart snapshots.

    Every scheduled snapshot gets a monotonically increasing sequence number
    and is written by one worker task strictly in scheduling order, so the
    snapshot scheduled last is always the one left in storage. Failed writes
    are reported and never retried: the next snapshot carries the full state.
    """

    def __init__(
        self, backend: PersistenceBackendI, storage_key: str, logger: AbstractLogger
    ):
        self._backend = backend
        self._storage_key = storage_key
        self._logger = logger
        self._queue: asyncio.Queue[_WriteRequest] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._last_seq = 0
        self.last_written_seq = 0

    @property
    def pending_count(self) -> int:
        return self._queue.qsize()

    def schedule(self, items: Cart) -> asyncio.Future[bool]:
        """Enqueues snapshot for writing. Returned future resolves to True
        once it is stored and to False if the write failed"""
        done = asyncio.get_running_loop().create_future()
        self._last_seq += 1
        self._queue.put_nowait(_WriteRequest(self._last_seq, items, done))
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="cart-snapshot-writer")
        return done

    async def _run(self) -> None:
        while True:
            req = await self._queue.get()
            try:
                written = await self._write(req)
            finally:
                self._queue.task_done()
            if not req.done.done():
                req.done.set_result(written)

    async def _write(self, req: _WriteRequest) -> bool:
        try:
            payload = CartSnapshot(list(req.items)).dumps()
            await self._backend.set(self._storage_key, payload)
        except Exception:
            self._logger.exception(
                "Failed to persist cart snapshot",
                seq=req.seq,
                storage_key=self._storage_key,
            )
            return False
        self.last_written_seq = req.seq
        self._logger.debug(
            "Cart snapshot persisted", seq=req.seq, items_count=len(req.items)
        )
        return True

    async def flush(self) -> None:
        await self._queue.join()

    async def aclose(self) -> None:
        await self.flush()
        if self._worker is not None:
            self._worker.cancel()
            with suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
