"""
Caching helpers for expensive dashboard queries
Uses Redis when configured, the local memory cache otherwise
"""
from django.core.cache import cache
from django.conf import settings
import logging

logger = logging.getLogger(__name__)

DASHBOARD_SUMMARY_KEY = "dashboard_summary"


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern
    Note: This requires Redis with SCAN command support
    """
    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")

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
        logger.debug(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def get_cached_dashboard_summary():
    return cache.get(DASHBOARD_SUMMARY_KEY)


def cache_dashboard_summary(data, ttl=None):
    """Cache the dashboard summary payload"""
    if ttl is None:
        ttl = settings.AGENCY['DASHBOARD_CACHE_TTL']
    cache.set(DASHBOARD_SUMMARY_KEY, data, ttl)
    logger.debug(f"Cached dashboard summary for {ttl}s")


def invalidate_dashboard_cache():
    """Invalidate dashboard summary cache"""
    cache.delete(DASHBOARD_SUMMARY_KEY)
    invalidate_cache_pattern("dashboard_")
