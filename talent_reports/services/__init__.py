"""Services package - database and cache services."""
from .snowflake import SnowflakeService, get_snowflake_service, is_undefined_relation
from .redis_cache import RedisCache, CacheKeys, get_redis_cache

__all__ = [
    "SnowflakeService",
    "get_snowflake_service",
    "is_undefined_relation",
    "RedisCache",
    "CacheKeys",
    "get_redis_cache",
]
