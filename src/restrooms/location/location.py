"""Location aggregate: one physical place whose restroom gets reviewed.

A Location is never created directly by users. It appears the first time a
review is submitted for its derived identity and is updated on every later
submission. It owns the ordered list of its review ids (newest first) and
the aggregate rating derived from those reviews.
"""

import json
from decimal import ROUND_HALF_UP, Decimal

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String, Text

from restrooms.domain import restrooms

_ONE_DECIMAL = Decimal("0.1")


def average_of(scores) -> float:
    """Mean of ``scores`` rounded half-up to one decimal; 0.0 when empty."""
    scores = list(scores)
    if not scores:
        return 0.0
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


@restrooms.aggregate
class Location:
    """A reviewed place, keyed by the identifier derived from its name and city."""

    name = String(required=True, max_length=255)
    address = String(max_length=500, default="")
    city = String(required=True, max_length=255)

    # Aggregates
    average_rating = Float(default=0.0)
    total_reviews = Integer(default=0)
    review_ids = Text(default="[]")  # JSON array of review ids, newest first

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def total_reviews_matches_review_ids(self):
        if self.total_reviews != len(self.review_id_list):
            raise ValidationError({"total_reviews": ["Review count must match the number of linked reviews"]})

    @invariant.post
    def average_rating_within_scale(self):
        if self.average_rating is not None and not (0 <= self.average_rating <= 5):
            raise ValidationError({"average_rating": ["Average rating must be between 0 and 5"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, location_id, name, city, address=None):
        """A brand-new location with no reviews yet."""
        return cls(
            id=location_id,
            name=name,
            address=address or "",
            city=city,
            average_rating=0.0,
            total_reviews=0,
            review_ids=json.dumps([]),
        )

    # -------------------------------------------------------------------
    # Review relationship
    # -------------------------------------------------------------------
    @property
    def review_id_list(self) -> list[str]:
        return json.loads(self.review_ids) if self.review_ids else []

    def link_review(self, review_id):
        """Put ``review_id`` at the head of the review list."""
        review_id = str(review_id)
        ids = [review_id] + [rid for rid in self.review_id_list if rid != review_id]

        with atomic_change(self):
            self.review_ids = json.dumps(ids)
            self.total_reviews = len(ids)

    def recompute_average(self, reviews):
        """Recalculate ``average_rating`` from the reviews that could be loaded."""
        self.average_rating = average_of(review.rating for review in reviews)

    def audit(self, reviews, recorded_total=None, recorded_average=None) -> list[str]:
        """Describe every way this location disagrees with its resolved ``reviews``.

        ``reviews`` are the records that could actually be loaded for
        ``review_id_list``. ``recorded_total`` and ``recorded_average`` are the
        figures as stored, when they differ from what was loaded. An empty
        result means the location is consistent.
        """
        problems = []
        ids = self.review_id_list
        total = self.total_reviews if recorded_total is None else recorded_total
        average = self.average_rating if recorded_average is None else recorded_average

        if total != len(ids):
            problems.append(f"total_reviews is {total} but {len(ids)} review ids are linked")

        duplicates = sorted({rid for rid in ids if ids.count(rid) > 1})
        if duplicates:
            problems.append(f"duplicate review ids: {', '.join(duplicates)}")

        resolved = {str(review.id) for review in reviews}
        missing = [rid for rid in ids if rid not in resolved]
        if missing:
            problems.append(f"unresolvable review ids: {', '.join(missing)}")

        expected = average_of(review.rating for review in reviews)
        if average != expected:
            problems.append(f"average_rating is {average} but reviews average {expected}")

        return problems
