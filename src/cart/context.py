from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from cart.domain.store import CartStore
from core.services.exceptions import CartContextError

_current_store: ContextVar[CartStore | None] = ContextVar(
    "_current_store", default=None
)


@contextmanager
def provide_cart(store: CartStore) -> Iterator[CartStore]:
    """Makes store available to use_cart() calls made inside the block"""
    token = _current_store.set(store)
    try:
        yield store
    finally:
        _current_store.reset(token)


def use_cart() -> CartStore:
    store = _current_store.get()
    if store is None:
        raise CartContextError()
    return store
