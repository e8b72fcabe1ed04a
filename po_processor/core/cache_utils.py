"""
Caching utilities for expensive aggregate queries
Uses Redis (django-redis) when configured
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
DASHBOARD_STATS_CACHE_TTL = 300  # 5 minutes
FORECAST_CACHE_TTL = 600  # 10 minutes


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=120, key_prefix="material_codes")
        def get_material_codes():
            return codes
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern
    Only Redis backends support pattern scans; other backends are skipped.
    """
    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")
    except NotImplementedError:
        logger.debug(f"Cache backend does not support pattern invalidation, skipped: {pattern}")
        return

    try:
        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def get_cached_dashboard_stats(day):
    """Get cached dashboard statistics for a day"""
    cache_key = make_cache_key("dashboard_stats", day)
    return cache.get(cache_key), cache_key


def cache_dashboard_stats(cache_key, data, ttl=DASHBOARD_STATS_CACHE_TTL):
    """Cache dashboard statistics"""
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached dashboard stats: {cache_key}")


def invalidate_dashboard_cache():
    """Invalidate dashboard statistics cache"""
    invalidate_cache_pattern("dashboard_stats")
    logger.info("Invalidated dashboard cache")


def invalidate_forecast_cache():
    """Invalidate material forecast cache"""
    invalidate_cache_pattern("material_forecast")
    invalidate_cache_pattern("material_codes")
    logger.info("Invalidated forecast cache")
