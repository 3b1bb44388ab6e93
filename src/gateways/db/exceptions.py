from collections.abc import Mapping

from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

from core.exception_mappers import AbstractExceptionMapper


class StorageError(Exception):
    def __init__(self, msg: str | None = None):
        self.msg = msg
        super().__init__(msg)


class StorageUnavailableError(StorageError): ...


class StorageTimeoutError(StorageUnavailableError): ...


class AbstractStorageExceptionMapper[K: Exception](
    AbstractExceptionMapper[K, StorageError]
):
    @classmethod
    def get_default_exc(cls) -> type[StorageError]:
        return StorageError


class RedisExceptionsMapper(AbstractStorageExceptionMapper[RedisError]):
    EXCEPTION_MAPPING: Mapping[type[RedisError], type[StorageError]] = {
        RedisTimeoutError: StorageTimeoutError,
        RedisConnectionError: StorageUnavailableError,
    }
