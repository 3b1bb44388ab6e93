from unittest.mock import AsyncMock

import pytest
from redis.exceptions import (
    AuthenticationError,
    ConnectionError as RedisConnectionError,
    ResponseError,
    TimeoutError as RedisTimeoutError,
)

from gateways.db import InMemoryStorage, RedisStorage
from gateways.db.exceptions import (
    RedisExceptionsMapper,
    StorageError,
    StorageTimeoutError,
    StorageUnavailableError,
)


@pytest.fixture
def db_mock() -> AsyncMock:
    return AsyncMock()


class TestRedisStorage:
    @pytest.mark.parametrize(
        ["stored", "expected"],
        [("[]", "[]"), (b'[{"id": "p1"}]', '[{"id": "p1"}]'), (None, None)],
    )
    @pytest.mark.asyncio
    async def test_get(self, db_mock, stored, expected):
        db_mock.get.return_value = stored
        assert await RedisStorage(db_mock).get("key") == expected
        db_mock.get.assert_awaited_once_with("key")

    @pytest.mark.asyncio
    async def test_set(self, db_mock):
        await RedisStorage(db_mock).set("key", "[]")
        db_mock.set.assert_awaited_once_with("key", "[]")

    @pytest.mark.parametrize(
        ["driver_exc", "expected_exc"],
        [
            (RedisConnectionError("refused"), StorageUnavailableError),
            (AuthenticationError("bad password"), StorageUnavailableError),
            (RedisTimeoutError("timeout"), StorageTimeoutError),
            (ResponseError("WRONGTYPE"), StorageError),
        ],
    )
    @pytest.mark.asyncio
    async def test_driver_errors_are_mapped(self, db_mock, driver_exc, expected_exc):
        db_mock.get.side_effect = driver_exc
        db_mock.set.side_effect = driver_exc
        storage = RedisStorage(db_mock)
        with pytest.raises(expected_exc) as get_exc_info:
            await storage.get("key")
        with pytest.raises(expected_exc):
            await storage.set("key", "[]")
        assert type(get_exc_info.value) is expected_exc
        assert get_exc_info.value.__cause__ is driver_exc

    @pytest.mark.asyncio
    async def test_aclose(self, db_mock):
        await RedisStorage(db_mock).aclose()
        db_mock.aclose.assert_awaited_once()


def test_unknown_exception_maps_to_default():
    assert RedisExceptionsMapper.map(ValueError("boom")) is StorageError  # type: ignore


@pytest.mark.asyncio
async def test_in_memory_storage():
    storage = InMemoryStorage({"a": "1"})
    assert await storage.get("a") == "1"
    assert await storage.get("b") is None
    await storage.set("b", "2")
    assert await storage.get("b") == "2"
