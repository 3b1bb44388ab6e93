import asyncio
import typing as t
from contextlib import nullcontext as does_not_raise

import pytest

from gateways.db import InMemoryStorage


def exc_to_ctx_manager(exc: type[Exception] | None):
    return pytest.raises(exc) if exc else does_not_raise()


def product_data(product_id: str = "p1", **kwargs) -> dict[str, t.Any]:
    return {
        "id": product_id,
        "title": "Shirt",
        "image_url": "https://cdn.test/shirt.png",
        "price": 10,
    } | kwargs


class SlowStorage(InMemoryStorage):
    """Storage which delays each write by the next value from delays"""

    def __init__(self, delays: t.Sequence[float]):
        super().__init__()
        self._delays = list(delays)
        self.writes: list[str] = []

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(self._delays.pop(0) if self._delays else 0)
        self.writes.append(value)
        await super().set(key, value)
