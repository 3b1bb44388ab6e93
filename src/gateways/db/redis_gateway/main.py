from redis.asyncio import Redis
from redis.exceptions import RedisError

from gateways.db.exceptions import (
    AbstractStorageExceptionMapper,
    RedisExceptionsMapper,
)


class RedisClient(Redis):
    @classmethod
    def from_url(
        cls,
        url: str,
        **kwargs,
    ) -> "RedisClient":
        return super().from_url(url, decode_responses=True, **kwargs)


class RedisStorage:
    """Key-value persistence backend on top of plain redis strings"""

    def __init__(
        self,
        db: Redis,
        exception_mapper: type[AbstractStorageExceptionMapper] = RedisExceptionsMapper,
    ):
        self._db = db
        self._exception_mapper = exception_mapper

    async def get(self, key: str) -> str | None:
        try:
            res = await self._db.get(key)
        except RedisError as e:
            self._exception_mapper.map_and_raise(e)
        if isinstance(res, bytes):
            return res.decode()
        return res

    async def set(self, key: str, value: str) -> None:
        try:
            await self._db.set(key, value)
        except RedisError as e:
            self._exception_mapper.map_and_raise(e)

    async def aclose(self) -> None:
        await self._db.aclose()
