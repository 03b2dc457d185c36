"""Review aggregate: one user's report on one location's restroom.

Location details are copied onto the review when it is submitted and are not
kept in sync afterwards. After creation only the vote counters change.

Vote state machine per (user, review):
    none --up--> up        none --down--> down
    up   --up--> none      up   --down--> down
    down --down--> none    down --up--> up
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from restrooms.domain import restrooms
from restrooms.location.identity import display_name_for

MIN_RATING = 1
MAX_RATING = 5

# The overall score comes first; it is the one that feeds the location average.
RATING_AXES = ("rating", "cleanliness", "accessibility", "supplies", "privacy")


class VoteType(Enum):
    UP = "up"
    DOWN = "down"


def is_valid_rating(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@restrooms.aggregate
class Review:
    """A rated, commented visit to a location."""

    # Location snapshot
    location_name = String(required=True, max_length=255)
    address = String(max_length=500, default="")
    city = String(required=True, max_length=255)

    # Ratings, 1 to 5 each
    rating = Integer(required=True)
    cleanliness = Integer(required=True)
    accessibility = Integer(required=True)
    supplies = Integer(required=True)
    privacy = Integer(required=True)

    comment = Text(required=True)

    # Author
    user_id = Identifier(required=True)
    username = String(max_length=100)

    created_at = DateTime(required=True)

    # Voting
    upvotes = Integer(default=0)
    downvotes = Integer(default=0)

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def rating_axes_must_be_in_range(self):
        errors = {
            axis: [f"{axis} must be between {MIN_RATING} and {MAX_RATING}"]
            for axis in RATING_AXES
            if not is_valid_rating(getattr(self, axis))
        }
        if errors:
            raise ValidationError(errors)

    @invariant.post
    def vote_counters_cannot_be_negative(self):
        if (self.upvotes or 0) < 0 or (self.downvotes or 0) < 0:
            raise ValidationError({"votes": ["Vote counters cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
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
    ):
        """Create a new review with a fresh id and zeroed vote counters."""
        return cls(
            location_name=location_name,
            address=address or "",
            city=city,
            rating=rating,
            cleanliness=cleanliness,
            accessibility=accessibility,
            supplies=supplies,
            privacy=privacy,
            comment=comment,
            user_id=user_id,
            username=display_name_for(str(user_id)),
            created_at=datetime.now(UTC),
            upvotes=0,
            downvotes=0,
        )

    # -------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------
    def apply_vote(self, previous, cast):
        """Move one voter from ``previous`` to the state reached by casting ``cast``.

        ``previous`` is the voter's current VoteType or None. Returns the
        voter's new VoteType, or None when the cast toggled the vote off.
        Decrements never take a counter below zero.
        """
        cast = VoteType(cast)
        previous = VoteType(previous) if previous is not None else None
        new_state = None if previous == cast else cast

        upvotes = self.upvotes or 0
        downvotes = self.downvotes or 0

        if previous == VoteType.UP:
            upvotes = max(0, upvotes - 1)
        elif previous == VoteType.DOWN:
            downvotes = max(0, downvotes - 1)

        if new_state == VoteType.UP:
            upvotes += 1
        elif new_state == VoteType.DOWN:
            downvotes += 1

        with atomic_change(self):
            self.upvotes = upvotes
            self.downvotes = downvotes

        return new_state
