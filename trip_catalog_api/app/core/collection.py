"""
Trip collection backed by SQLite.

``TripCollection`` is the only code that knows how trips are stored.
Services talk to it in terms of ``Trip`` models and the typed
``FilterSpec``/``SortSpec`` values produced by the query builder.

Reviews are embedded in the trip row as a JSON array, so a trip and
its derived rating fields are always written by a single statement.
Every persisted trip carries a ``version`` that ``save`` checks and
increments; a stale version raises ``ConcurrencyConflictError``
instead of overwriting a concurrent write.

All ``sqlite3`` failures are re‑raised as ``PersistenceError`` (or
``DuplicateTripError`` for a code that already exists) carrying the
original message.  Each call opens and closes its own connection.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from ..schemas.trip import Trip
from ..services.query_builder import RELEVANCE, FilterSpec, SortSpec
from .db import Database
from .errors import ConcurrencyConflictError, DuplicateTripError, PersistenceError


logger = logging.getLogger(__name__)

EDITABLE_COLUMNS = ("code", "name", "length", "start", "resort", "per_person", "image", "description")
SORTABLE_COLUMNS = {
    "code",
    "name",
    "length",
    "start",
    "resort",
    "per_person",
    "average_rating",
    "total_reviews",
}


def fts_query(text: str) -> str:
    """Quote each term so user input never reaches the FTS5 query syntax.

    Terms are OR‑ed: a trip matches when any term occurs in its name
    or description, and bm25 ranks trips matching more terms higher.
    """
    terms = ['"{}"'.format(term.replace('"', '""')) for term in text.split()]
    return " OR ".join(terms)


def _to_column(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class TripCollection:
    """Query and persist trips."""

    def __init__(self, database: Database):
        self.database = database

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            with self.database.get_cursor() as cursor:
                yield cursor
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateTripError("A trip with this code already exists") from e
            logger.error("Trip collection integrity error: %s", e)
            raise PersistenceError(str(e)) from e
        except sqlite3.Error as e:
            logger.error("Trip collection failure: %s", e)
            raise PersistenceError(str(e)) from e

    @staticmethod
    def _row_to_trip(row: sqlite3.Row) -> Trip:
        return Trip(
            code=row["code"],
            name=row["name"],
            length=row["length"],
            start=row["start"],
            resort=row["resort"],
            per_person=row["per_person"],
            image=row["image"],
            description=row["description"],
            reviews=json.loads(row["reviews"]),
            average_rating=row["average_rating"],
            total_reviews=row["total_reviews"],
            version=row["version"],
        )

    @staticmethod
    def _dump_reviews(trip: Trip) -> str:
        return json.dumps([review.model_dump(mode="json") for review in trip.reviews])

    def find(self, trip_filter: Optional[FilterSpec] = None, sort: Optional[SortSpec] = None) -> List[Trip]:
        """Return trips matching ``trip_filter`` ordered by ``sort``."""
        trip_filter = trip_filter or FilterSpec()
        sort = sort or SortSpec()
        where: List[str] = []
        params: List[Any] = []

        if trip_filter.text:
            query = (
                "SELECT t.*, bm25(trips_fts) AS relevance FROM trips_fts "
                "JOIN trips t ON t.id = trips_fts.rowid"
            )
            where.append("trips_fts MATCH ?")
            params.append(fts_query(trip_filter.text))
        else:
            query = "SELECT t.* FROM trips t"

        if trip_filter.min_price is not None:
            where.append("t.per_person >= ?")
            params.append(trip_filter.min_price)
        if trip_filter.max_price is not None:
            where.append("t.per_person <= ?")
            params.append(trip_filter.max_price)
        if trip_filter.min_length is not None:
            where.append("t.length >= ?")
            params.append(trip_filter.min_length)
        if trip_filter.max_length is not None:
            where.append("t.length <= ?")
            params.append(trip_filter.max_length)
        if trip_filter.resort:
            where.append("instr(casefold(t.resort), ?) > 0")
            params.append(trip_filter.resort.casefold())
        if trip_filter.reviewed_only:
            where.append("t.total_reviews > 0")

        if where:
            query += " WHERE " + " AND ".join(where)

        if sort.field == RELEVANCE and trip_filter.text:
            # bm25 is lower for better matches.
            query += " ORDER BY relevance " + ("ASC" if sort.descending else "DESC")
        else:
            field = sort.field if sort.field in SORTABLE_COLUMNS else "name"
            query += f" ORDER BY t.{field} " + ("DESC" if sort.descending else "ASC")

        with self._cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [self._row_to_trip(row) for row in rows]

    def find_one(self, code: str) -> Optional[Trip]:
        with self._cursor() as cursor:
            row = cursor.execute("SELECT * FROM trips WHERE code = ?", (code,)).fetchone()
        return self._row_to_trip(row) if row else None

    def insert(self, trip: Trip) -> Trip:
        """Persist a new trip and return it as stored."""
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO trips (code, name, length, start, resort, per_person, image, description,
                                   reviews, average_rating, total_reviews, version)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 1)
                """,
                (
                    trip.code,
                    trip.name,
                    trip.length,
                    trip.start.isoformat(),
                    trip.resort,
                    trip.per_person,
                    trip.image,
                    trip.description,
                    self._dump_reviews(trip),
                    trip.average_rating,
                    trip.total_reviews,
                ),
            )
            row = cursor.execute("SELECT * FROM trips WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return self._row_to_trip(row)

    def save(self, trip: Trip) -> Trip:
        """Write every field of an existing trip if its version is current.

        Raises ``ConcurrencyConflictError`` when another writer saved
        the trip since it was loaded.
        """
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE trips
                SET name = ?, length = ?, start = ?, resort = ?, per_person = ?, image = ?,
                    description = ?, reviews = ?, average_rating = ?, total_reviews = ?,
                    version = version + 1, updated_at = CURRENT_TIMESTAMP
                WHERE code = ? AND version = ?
                """,
                (
                    trip.name,
                    trip.length,
                    trip.start.isoformat(),
                    trip.resort,
                    trip.per_person,
                    trip.image,
                    trip.description,
                    self._dump_reviews(trip),
                    trip.average_rating,
                    trip.total_reviews,
                    trip.code,
                    trip.version,
                ),
            )
            if cursor.rowcount == 0:
                raise ConcurrencyConflictError(
                    f"Trip {trip.code} was modified concurrently (version {trip.version})"
                )
        return trip.model_copy(update={"version": trip.version + 1})

    def update_one(self, code: str, fields: Dict[str, Any]) -> Optional[Trip]:
        """Set the given editable fields on the trip with ``code``.

        Returns the updated trip, or ``None`` when no trip has that code.
        """
        updates = {key: value for key, value in fields.items() if key in EDITABLE_COLUMNS}
        if not updates:
            return self.find_one(code)
        assignments = ", ".join(f"{key} = ?" for key in updates)
        values = [_to_column(value) for value in updates.values()]
        with self._cursor() as cursor:
            cursor.execute(
                f"UPDATE trips SET {assignments}, version = version + 1, "
                "updated_at = CURRENT_TIMESTAMP WHERE code = ?",
                (*values, code),
            )
            if cursor.rowcount == 0:
                return None
            row = cursor.execute(
                "SELECT * FROM trips WHERE code = ?", (updates.get("code", code),)
            ).fetchone()
        return self._row_to_trip(row)

    def aggregate(self) -> Dict[str, Any]:
        """Return raw catalog‑wide aggregates in a single grouped query.

        Averages, minimum and maximum are ``None`` for an empty table.
        """
        with self._cursor() as cursor:
            row = cursor.execute(
                """
                SELECT COUNT(*) AS total_trips,
                       AVG(per_person) AS average_price,
                       MIN(per_person) AS min_price,
                       MAX(per_person) AS max_price,
                       AVG(length) AS average_length,
                       COALESCE(SUM(total_reviews), 0) AS total_reviews,
                       AVG(average_rating) AS average_rating
                FROM trips
                """
            ).fetchone()
        return dict(row)
