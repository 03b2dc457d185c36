"""Location records and the global location index, on the key-value store.

Single-record reads and writes only. Keeping ``average_rating``,
``total_reviews`` and index membership consistent with the reviews is the
aggregation engine's job.
"""

import json
import threading

from protean.exceptions import ValidationError

from restrooms.location.location import Location
from restrooms.store.base import KeyValueStore
from restrooms.store.keys import KeyLayout
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)


def location_to_record(location: Location) -> dict:
    return {
        "id": str(location.id),
        "name": location.name,
        "address": location.address or "",
        "city": location.city,
        "average_rating": location.average_rating or 0.0,
        "total_reviews": location.total_reviews or 0,
        "review_ids": location.review_id_list,
    }


def location_from_record(record: dict) -> Location:
    """Rebuild a Location from its stored record.

    The review id list is authoritative. ``total_reviews`` is recounted from it
    and an out-of-scale ``average_rating`` is reset to 0.0, so a drifted record
    still loads and is repaired by the next write.
    """
    review_ids = record.get("review_ids") or []
    if not isinstance(review_ids, list):
        raise TypeError(f"review_ids must be a list, got {type(review_ids).__name__}")
    review_ids = [str(rid) for rid in review_ids]

    average_rating = float(record.get("average_rating") or 0.0)
    if not 0 <= average_rating <= 5:
        average_rating = 0.0

    return Location(
        id=record["id"],
        name=record["name"],
        address=record.get("address") or "",
        city=record["city"],
        average_rating=average_rating,
        total_reviews=len(review_ids),
        review_ids=json.dumps(review_ids),
    )


class LocationRepository:
    def __init__(self, store: KeyValueStore, keys: KeyLayout | None = None):
        self.store = store
        self.keys = keys or KeyLayout()
        self._index_lock = threading.Lock()

    def read_record(self, location_id: str) -> dict | None:
        """The stored record as written, or None if missing or undecodable."""
        payload = self.store.get(self.keys.location(location_id))
        if payload is None:
            return None

        try:
            record = json.loads(payload)
        except ValueError as exc:
            logger.warning("Undecodable location record, treating as absent", location_id=location_id, error=str(exc))
            return None

        if not isinstance(record, dict):
            logger.warning("Location record is not an object, treating as absent", location_id=location_id)
            return None
        return record

    def rebuild(self, location_id: str, record: dict) -> Location | None:
        try:
            return location_from_record(record)
        except (ValueError, TypeError, KeyError, ValidationError) as exc:
            logger.warning("Unusable location record, treating as absent", location_id=location_id, error=str(exc))
            return None

    def get(self, location_id: str) -> Location | None:
        record = self.read_record(location_id)
        if record is None:
            return None
        return self.rebuild(location_id, record)

    def put(self, location: Location) -> None:
        payload = json.dumps(location_to_record(location)).encode("utf-8")
        self.store.set(self.keys.location(str(location.id)), payload)

    def list_index(self) -> list[str]:
        """All known location ids, newest first. Empty if the index is missing or corrupt."""
        payload = self.store.get(self.keys.location_index())
        if payload is None:
            return []

        try:
            ids = json.loads(payload)
        except ValueError as exc:
            logger.warning("Unreadable location index, treating as empty", error=str(exc))
            return []

        if not isinstance(ids, list):
            logger.warning("Location index is not a list, treating as empty")
            return []
        return [str(location_id) for location_id in ids]

    def append_to_index(self, location_id: str) -> bool:
        """Prepend ``location_id`` to the index unless already present.

        Returns True when the index was rewritten.
        """
        with self._index_lock:
            ids = self.list_index()
            if location_id in ids:
                return False

            ids.insert(0, location_id)
            self.store.set(self.keys.location_index(), json.dumps(ids).encode("utf-8"))
            return True
