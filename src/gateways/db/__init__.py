from .memory_gateway import InMemoryStorage
from .redis_gateway import RedisClient, RedisStorage

__all__ = ["InMemoryStorage", "RedisClient", "RedisStorage"]
