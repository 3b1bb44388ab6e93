import typing as t
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

import punq

from cart.context import provide_cart
from cart.domain.interfaces import PersistenceBackendI, SupportsAsyncClose
from cart.domain.store import CartStore
from config import Config, StorageBackend, init_config
from core.logging import AbstractLogger, AppLogger
from gateways.db import InMemoryStorage, RedisClient, RedisStorage


@lru_cache(1)
def get_container() -> punq.Container:
    return init_container(init_config())


cleanup_list: list[SupportsAsyncClose] = []


def register_for_cleanup(obj: SupportsAsyncClose):
    cleanup_list.append(obj)


def _init_backend(cfg: Config) -> PersistenceBackendI:
    if cfg.storage.backend == StorageBackend.REDIS:
        return RedisStorage(RedisClient.from_url(str(cfg.storage.redis_dsn)))
    return InMemoryStorage()


def init_container(cfg: Config) -> punq.Container:
    container = punq.Container()
    logger = AppLogger(cfg.debug, cfg.logging.error_log_path)
    backend = _init_backend(cfg)
    store = CartStore(backend, logger, storage_key=cfg.cart.storage_key)
    # store goes first so pending writes are flushed before backend is closed
    register_for_cleanup(store)
    register_for_cleanup(backend)  # type: ignore
    container.register(Config, instance=cfg)
    container.register(AbstractLogger, instance=logger)
    container.register(PersistenceBackendI, instance=backend)
    container.register(CartStore, instance=store)
    return container


def Resolve[T](dep: type[T] | str, **kwargs) -> T:
    return t.cast(T, get_container().resolve(dep, **kwargs))


@asynccontextmanager
async def lifespan() -> AsyncIterator[CartStore]:
    """Loads the cart and makes it available through use_cart() inside the block.
    On exit waits for pending writes and closes the storage"""
    logger = Resolve(AbstractLogger)
    cfg = Resolve(Config)
    store = Resolve(CartStore)
    logger.info(
        "Loading cart",
        mode=cfg.mode,
        storage_backend=cfg.storage.backend,
        storage_key=store.storage_key,
    )
    await store.initialize()
    logger.info("Cart is ready")
    try:
        with provide_cart(store):
            yield store
    finally:
        try:
            for obj in cleanup_list:
                try:
                    await obj.aclose()
                except Exception:
                    logger.exception("Failed to close resource", resource=obj)
        finally:
            cleanup_list.clear()
