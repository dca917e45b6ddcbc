"""Centralized FastAPI dependency definitions for the API layer.

Routers should import dependencies from here instead of directly from
their underlying implementation modules. This provides:

* A stable import surface (refactors in lower layers don't ripple up)
* Easier test overrides via ``app.dependency_overrides[deps.get_db]``
* A single owner for the thread read cache shared by all requests
"""

from mbbs.core.cache import ModelCache
from mbbs.db.session import get_db
from mbbs.core.auth import get_current_user, require_user
from mbbs.models.thread import Thread
from mbbs.services.thread import get_thread_cache


def thread_cache() -> ModelCache[Thread]:
    return get_thread_cache()


__all__ = ["get_db", "get_current_user", "require_user", "thread_cache"]
