import asyncio
import typing as t
from collections.abc import Callable, Mapping

from pydantic import ValidationError

from cart.constants import DEFAULT_STORAGE_KEY
from cart.domain.interfaces import Cart, CartListener, PersistenceBackendI
from cart.schemas import CartSnapshot, LineItem, ProductDTO
from cart.writer import SnapshotWriter
from core.logging import AbstractLogger
from core.services.exceptions import (
    InvalidProductError,
    MalformedSnapshotError,
    StoreNotReadyError,
)


class CartStore:
    """Authoritative in-memory cart kept in sync with a persistence backend.

    Mutations publish the new cart synchronously and schedule a write of the
    whole snapshot, so they must be called from within a running event loop.
    Each of them returns a future resolving to True once its snapshot is stored,
    awaiting it is optional.
    """

    def __init__(
        self,
        backend: PersistenceBackendI,
        logger: AbstractLogger,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        self._backend = backend
        self._logger = logger
        self.storage_key = storage_key
        self._items: Cart = ()
        self._listeners: list[CartListener] = []
        self._ready = asyncio.Event()
        self._init_started = False
        self._writer = SnapshotWriter(backend, storage_key, logger)

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def wait_ready(self) -> None:
        await self._ready.wait()

    async def initialize(self) -> None:
        """Loads stored snapshot once. Repeated calls wait for the first load"""
        if self._init_started:
            await self._ready.wait()
            return
        self._init_started = True
        try:
            self._items = await self._load_snapshot()
        finally:
            self._ready.set()
        self._notify()

    async def _load_snapshot(self) -> Cart:
        try:
            payload = await self._backend.get(self.storage_key)
        except Exception:
            self._logger.exception(
                "Failed to load cart snapshot, starting with empty cart",
                storage_key=self.storage_key,
            )
            return ()
        if not payload:
            self._logger.info("Stored cart not found", storage_key=self.storage_key)
            return ()
        try:
            snapshot = CartSnapshot.loads(payload)
        except MalformedSnapshotError as e:
            self._logger.warning(
                "Stored cart snapshot is malformed, starting with empty cart",
                storage_key=self.storage_key,
                error=str(e),
            )
            return ()
        self._logger.info("Cart loaded", items_count=len(snapshot.root))
        return tuple(snapshot.root)

    def current_cart(self) -> Cart:
        return self._items

    def get_item(self, product_id: str) -> LineItem | None:
        return next((item for item in self._items if item.id == product_id), None)

    def add_to_cart(
        self, product: ProductDTO | Mapping[str, t.Any]
    ) -> asyncio.Future[bool]:
        self._require_ready()
        try:
            dto = ProductDTO.model_validate(product)
        except ValidationError as e:
            raise InvalidProductError(str(e)) from e
        existing = self.get_item(dto.id)
        if existing is None:
            items = (*self._items, LineItem.from_product(dto))
        else:
            items = self._replaced(existing.with_quantity(existing.quantity + 1))
        return self._commit(items)

    def increment(self, product_id: str) -> asyncio.Future[bool]:
        self._require_ready()
        item = self.get_item(product_id)
        if item is None:
            return self._skip("increment", product_id)
        return self._commit(self._replaced(item.with_quantity(item.quantity + 1)))

    def decrement(self, product_id: str) -> asyncio.Future[bool]:
        self._require_ready()
        item = self.get_item(product_id)
        if item is None:
            return self._skip("decrement", product_id)
        if item.quantity <= 1:
            items = tuple(i for i in self._items if i.id != product_id)
        else:
            items = self._replaced(item.with_quantity(item.quantity - 1))
        return self._commit(items)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Registers listener called with the new cart after every change.
        Returns a callable which unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def flush(self) -> None:
        await self._writer.flush()

    async def aclose(self) -> None:
        await self._writer.aclose()
        self._listeners.clear()

    def _require_ready(self) -> None:
        if not self._ready.is_set():
            raise StoreNotReadyError()

    def _replaced(self, new_item: LineItem) -> Cart:
        return tuple(
            new_item if item.id == new_item.id else item for item in self._items
        )

    def _commit(self, items: Cart) -> asyncio.Future[bool]:
        self._items = items
        pending_write = self._writer.schedule(items)
        self._notify()
        return pending_write

    def _skip(self, operation: str, product_id: str) -> asyncio.Future[bool]:
        self._logger.debug(
            "Product is not in cart, skipping",
            operation=operation,
            product_id=product_id,
        )
        noop = asyncio.get_running_loop().create_future()
        noop.set_result(False)
        return noop

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._items)
            except Exception:
                self._logger.exception("Cart listener failed", listener=listener)
