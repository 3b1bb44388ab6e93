import typing as t
from collections.abc import Callable

from cart.schemas import LineItem

type Cart = tuple[LineItem, ...]
type CartListener = Callable[[Cart], t.Any]


class PersistenceBackendI(t.Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class SupportsAsyncClose(t.Protocol):
    async def aclose(self): ...
