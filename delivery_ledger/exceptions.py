"""
Service-level errors.

Validation problems are plain ValueError, as everywhere in the
services. The two subclasses below let the API layer pick the
right status code.
"""


class NotFoundError(ValueError):
    """A company, receipt or history entry does not exist."""


class PersistenceError(RuntimeError):
    """
    The database rejected a write.

    The caller must roll back and re-fetch; no state should be
    presented as saved.
    """
