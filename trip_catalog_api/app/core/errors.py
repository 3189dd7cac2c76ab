"""
Exceptions raised by the trip catalog core.

A missing trip is not an error: lookups return ``None`` or an empty
list and the HTTP layer chooses the response code.  Failures of the
storage layer are wrapped in :class:`PersistenceError` carrying the
underlying message and propagated unmodified; nothing is retried
except the versioned review write (see ``TripService.add_review``).

Each exception carries the HTTP status the global handler in
``main.py`` responds with.
"""


class TripCatalogError(Exception):
    """Base exception for all trip catalog errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class PersistenceError(TripCatalogError):
    """The trip collection could not complete an operation."""

    status_code = 500


class DuplicateTripError(TripCatalogError):
    """A trip with the same code already exists."""

    status_code = 409


class ConcurrencyConflictError(TripCatalogError):
    """A versioned write lost the race against another writer."""

    status_code = 409
