"""
Per-user session cache.

A verified session is remembered for ``SESSION_CACHE_TTL`` seconds so that
repeated requests with the same token do not re-read the user row. Entries
are dropped on logout and whenever the user row is saved or deleted, which
covers role changes, (de)activation and password resets.
"""
import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import User

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = 'session:'


def get_session_cache_key(user_id) -> str:
    """Get cache key for a user's session entry"""
    return f"{SESSION_KEY_PREFIX}{user_id}"


class SessionCache:
    """Explicit session entries: (user, checked_at) kept for ``ttl`` seconds."""

    def __init__(self, ttl=None):
        self._ttl = ttl

    @property
    def ttl(self):
        if self._ttl is not None:
            return self._ttl
        return getattr(settings, 'SESSION_CACHE_TTL', 60)

    def get(self, user_id):
        """Return the cached user, or None on a miss or an expired entry"""
        entry = cache.get(get_session_cache_key(user_id))
        if not entry:
            return None
        if time.time() - entry['checked_at'] >= entry['ttl']:
            self.invalidate(user_id)
            return None
        logger.debug(f"Session cache hit for user {user_id}")
        return entry['user']

    def store(self, user):
        ttl = self.ttl
        if ttl <= 0:
            return
        entry = {
            'user': user,
            'role': user.role,
            'is_active': user.is_active,
            'checked_at': time.time(),
            'ttl': ttl,
        }
        cache.set(get_session_cache_key(user.pk), entry, ttl)
        logger.debug(f"Cached session for user {user.pk} ({user.role})")

    def invalidate(self, user_id):
        cache.delete(get_session_cache_key(user_id))
        logger.debug(f"Invalidated session cache for user {user_id}")


session_cache = SessionCache()


@receiver(post_save, sender=User)
def invalidate_session_on_save(sender, instance, **kwargs):
    session_cache.invalidate(instance.pk)


@receiver(post_delete, sender=User)
def invalidate_session_on_delete(sender, instance, **kwargs):
    session_cache.invalidate(instance.pk)
