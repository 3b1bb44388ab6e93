from .main import RedisClient, RedisStorage

__all__ = ["RedisClient", "RedisStorage"]
