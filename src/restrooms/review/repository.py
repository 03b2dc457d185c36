"""Review records on the key-value store."""

import json
from datetime import datetime

from protean.exceptions import ValidationError

from restrooms.review.review import RATING_AXES, Review
from restrooms.store.base import KeyValueStore
from restrooms.store.keys import KeyLayout
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)


def review_to_record(review: Review) -> dict:
    record = {
        "id": str(review.id),
        "location_name": review.location_name,
        "address": review.address or "",
        "city": review.city,
        "comment": review.comment,
        "user_id": str(review.user_id),
        "username": review.username,
        "created_at": review.created_at.isoformat(),
        "upvotes": review.upvotes or 0,
        "downvotes": review.downvotes or 0,
    }
    record.update({axis: getattr(review, axis) for axis in RATING_AXES})
    return record


def review_from_record(record: dict) -> Review:
    return Review(
        id=record["id"],
        location_name=record["location_name"],
        address=record.get("address") or "",
        city=record["city"],
        comment=record["comment"],
        user_id=record["user_id"],
        username=record.get("username"),
        created_at=datetime.fromisoformat(record["created_at"]),
        upvotes=int(record.get("upvotes", 0)),
        downvotes=int(record.get("downvotes", 0)),
        **{axis: record[axis] for axis in RATING_AXES},
    )


class ReviewRepository:
    def __init__(self, store: KeyValueStore, keys: KeyLayout | None = None):
        self.store = store
        self.keys = keys or KeyLayout()

    def get(self, review_id: str) -> Review | None:
        payload = self.store.get(self.keys.review(review_id))
        if payload is None:
            return None

        try:
            return review_from_record(json.loads(payload))
        except (ValueError, TypeError, KeyError, ValidationError) as exc:
            logger.warning("Unreadable review record, treating as absent", review_id=review_id, error=str(exc))
            return None

    def put(self, review: Review) -> None:
        payload = json.dumps(review_to_record(review)).encode("utf-8")
        self.store.set(self.keys.review(str(review.id)), payload)

    def load_many(self, review_ids) -> list[Review]:
        """Load reviews in the given order, skipping ids with no readable record."""
        reviews = []
        for review_id in review_ids:
            review = self.get(review_id)
            if review is None:
                logger.debug("Review not found, skipping", review_id=review_id)
                continue
            reviews.append(review)
        return reviews
