"""Centralized FastAPI dependency definitions for the API layer.

Routers should import dependencies from here instead of directly from
their underlying implementation modules. This provides:

* A stable import surface (refactors in lower layers don't ripple up)
* Easier test overrides via ``app.dependency_overrides[deps.get_db]``
  (the generation routes are usually tested by overriding
  ``get_text_generator`` with a canned generator)

Add new dependency callables here as the API grows.
"""

from ideaboard.db.session import get_db
from ideaboard.core.auth import get_current_user, get_requester_id
from ideaboard.core.cache import get_response_cache
from ideaboard.core.modelhub import get_text_generator

__all__ = [
    "get_db",
    "get_current_user",
    "get_requester_id",
    "get_response_cache",
    "get_text_generator",
]
