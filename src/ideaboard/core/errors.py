"""Project-wide custom exceptions.

This module centralizes domain-specific exception types so that routers and
services can raise / catch them without importing deep infrastructure errors
like ``asyncpg``, ``openai`` or raw SQLAlchemy exceptions.

Add new errors here rather than scattering small ``class XError(Exception):``
definitions across the codebase; this keeps the public error surface easy to
audit and map to HTTP responses:

* ``IdeaValidationError``   -> 400
* ``IdeaNotFoundError``     -> 404
* ``IdeaNotOwnedError``     -> 403
* ``UserNotFoundError``     -> 404
* ``DuplicateEmailError``   -> 409
* ``GenerationUnavailable`` -> 503
"""
from __future__ import annotations

import uuid


class IdeaboardError(Exception):
    """Base class for all custom project exceptions.

    Subclass this rather than ``Exception`` directly for new domain errors.
    """


class IdeaValidationError(IdeaboardError):
    """Missing or malformed required input (absent title, bad date, ...)."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class IdeaNotFoundError(IdeaboardError):
    """Referenced idea id does not exist."""

    def __init__(self, idea_id: uuid.UUID | str | None = None):
        self.idea_id = idea_id
        super().__init__("Idea not found")


class IdeaNotOwnedError(IdeaboardError):
    """Idea exists but belongs to a different user."""

    def __init__(self, idea_id: uuid.UUID | str | None = None):
        self.idea_id = idea_id
        super().__init__("Not authorized to access this idea")


class UserNotFoundError(IdeaboardError):
    """Raised when a user id does not correspond to a stored record."""


class DuplicateEmailError(IdeaboardError):
    """Raised when attempting to create/update a user with an existing email."""


class GenerationUnavailable(IdeaboardError):
    """The text generation provider could not be reached or refused the call.

    Only transport level failures (network, auth, timeout, missing
    configuration) end up here. A provider that answers with unusable text is
    not an error; the idea parser degrades that to placeholder content.
    """

    def __init__(self, reason: str | None = None):
        self.reason = reason or "unavailable"
        super().__init__(f"Idea generation service unavailable ({self.reason})")


__all__ = [
    "IdeaboardError",
    "IdeaValidationError",
    "IdeaNotFoundError",
    "IdeaNotOwnedError",
    "UserNotFoundError",
    "DuplicateEmailError",
    "GenerationUnavailable",
]
