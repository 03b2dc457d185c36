"""Aggregation engine: the only writer of cross-record state.

Repositories read and write single records. The engine strings those calls
together for review submission and voting, keeps each Location's review list,
count and average in step with its reviews, and assembles the listing.

The store has no transactions. Each operation is a fixed sequence of single
writes and can be retried from the top:

submit_review
    1. validate input                   (no writes)
    2. derive the location id           (pure)
    3. load or register the location    (index append is idempotent)
    4-5. build and write the review     (fresh key every attempt)
    6-8. link, recompute, write the location
         (recomputed from stored reviews, so a retry converges)

    A failure after step 5 leaves a review record no location points at.

cast_vote
    load review -> read vote -> write/clear vote -> write review

    A failure between the vote write and the review write leaves the ledger
    one step ahead of the counters. Counters are clamped at zero.

Writes are serialised per location id (submissions) and per review id
(votes) within this process.
"""

import threading
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError

from restrooms.config import get_settings
from restrooms.location.identity import derive_location_id
from restrooms.location.location import Location
from restrooms.location.repository import LocationRepository
from restrooms.review.ledger import VoteLedger
from restrooms.review.repository import ReviewRepository
from restrooms.review.review import MAX_RATING, MIN_RATING, RATING_AXES, Review, VoteType, is_valid_rating
from restrooms.store.base import KeyValueStore
from restrooms.store.keys import KeyLayout
from restrooms.store.registry import get_store
from restrooms.utils.locks import KeyedLock
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class LocationListing:
    """A location together with the reviews that could be loaded for it."""

    location: Location
    reviews: list[Review] = field(default_factory=list)


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_submission(location_name, city, comment, user_id, ratings: dict) -> None:
    """Raise ValidationError listing every problem with a review submission."""
    errors = {}
    if _blank(location_name):
        errors["location_name"] = ["Location name is required"]
    if _blank(city):
        errors["city"] = ["City is required"]
    if _blank(comment):
        errors["comment"] = ["Comment is required"]
    if _blank(user_id):
        errors["user_id"] = ["User id is required"]

    for axis in RATING_AXES:
        if not is_valid_rating(ratings.get(axis)):
            errors[axis] = [f"{axis} must be between {MIN_RATING} and {MAX_RATING}"]

    if errors:
        raise ValidationError(errors)


class AggregationEngine:
    def __init__(self, store: KeyValueStore, keys: KeyLayout | None = None):
        self.store = store
        self.keys = keys or KeyLayout(get_settings().key_prefix)
        self.locations = LocationRepository(store, self.keys)
        self.reviews = ReviewRepository(store, self.keys)
        self.votes = VoteLedger(store, self.keys)

        self._location_locks = KeyedLock()
        self._review_locks = KeyedLock()

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def submit_review(
        self,
        location_name,
        city,
        rating,
        cleanliness,
        accessibility,
        supplies,
        privacy,
        comment,
        user_id,
        address=None,
    ) -> tuple[Review, Location]:
        """Record a review and fold it into its location's aggregate.

        Returns the stored review and the updated location.
        """
        ratings = {
            "rating": rating,
            "cleanliness": cleanliness,
            "accessibility": accessibility,
            "supplies": supplies,
            "privacy": privacy,
        }
        validate_submission(location_name, city, comment, user_id, ratings)

        location_name = location_name.strip()
        city = city.strip()
        address = address.strip() if address else ""
        comment = comment.strip()
        user_id = str(user_id)

        location_id = derive_location_id(location_name, city)

        with self._location_locks.hold(location_id):
            location = self.locations.get(location_id)
            if location is None:
                location = Location.register(location_id, name=location_name, city=city, address=address)
                self.locations.append_to_index(location_id)
                logger.info("Location registered", location_id=location_id, name=location_name, city=city)

            review = Review.submit(
                location_name=location_name,
                address=address,
                city=city,
                comment=comment,
                user_id=user_id,
                **ratings,
            )
            self.reviews.put(review)

            location.link_review(review.id)
            location.recompute_average(self.reviews.load_many(location.review_id_list))
            self.locations.put(location)

        logger.info(
            "Review submitted",
            review_id=str(review.id),
            location_id=location_id,
            average_rating=location.average_rating,
            total_reviews=location.total_reviews,
        )
        return review, location

    # -------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------
    def cast_vote(self, review_id, vote_type, user_id) -> tuple[int, int]:
        """Apply one up/down vote by ``user_id``. Returns (upvotes, downvotes)."""
        try:
            cast = VoteType(vote_type)
        except ValueError:
            raise ValidationError({"vote_type": ["Vote type must be 'up' or 'down'"]}) from None
        if _blank(review_id):
            raise ValidationError({"review_id": ["Review id is required"]})
        if _blank(user_id):
            raise ValidationError({"user_id": ["User id is required"]})

        review_id = str(review_id)
        user_id = str(user_id)

        with self._review_locks.hold(review_id):
            review = self.reviews.get(review_id)
            if review is None:
                raise ObjectNotFoundError({"_entity": f"Review with id {review_id} does not exist"})

            previous = self.votes.get_vote(user_id, review_id)
            new_state = review.apply_vote(previous, cast)

            if new_state is None:
                self.votes.clear_vote(user_id, review_id)
            else:
                self.votes.set_vote(user_id, review_id, new_state)
            self.reviews.put(review)

        logger.info(
            "Vote recorded",
            review_id=review_id,
            previous=previous.value if previous else None,
            current=new_state.value if new_state else None,
            upvotes=review.upvotes,
            downvotes=review.downvotes,
        )
        return review.upvotes, review.downvotes

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def list_locations(self) -> list[LocationListing]:
        """Every indexed location with its reviews, worst average first.

        Reviews are newest first. Index entries without a readable location
        record are left out.
        """
        listings = []
        for location_id in self.locations.list_index():
            location = self.locations.get(location_id)
            if location is None:
                logger.warning("Indexed location has no record", location_id=location_id)
                continue

            reviews = self.reviews.load_many(location.review_id_list)
            reviews.sort(key=lambda review: review.created_at, reverse=True)
            listings.append(LocationListing(location=location, reviews=reviews))

        listings.sort(key=lambda listing: listing.location.average_rating or 0.0)
        return listings

    def check_location(self, location_id: str) -> list[str]:
        """Problems with one location's aggregate, empty when consistent."""
        record = self.locations.read_record(location_id)
        location = self.locations.rebuild(location_id, record) if record is not None else None
        if location is None:
            return [f"location {location_id} has no readable record"]
        return location.audit(
            self.reviews.load_many(location.review_id_list),
            recorded_total=record.get("total_reviews"),
            recorded_average=record.get("average_rating"),
        )

    def check_all(self) -> dict[str, list[str]]:
        """Problems for every indexed location that has any."""
        report = {}
        for location_id in self.locations.list_index():
            problems = self.check_location(location_id)
            if problems:
                report[location_id] = problems
        return report


_engine: AggregationEngine | None = None
_engine_lock = threading.Lock()


def get_engine() -> AggregationEngine:
    """Engine bound to the current process-wide store.

    Rebuilt whenever the store is swapped so that locks and repositories
    always refer to the same backend.
    """
    global _engine
    store = get_store()
    with _engine_lock:
        if _engine is None or _engine.store is not store:
            _engine = AggregationEngine(store)
        return _engine
