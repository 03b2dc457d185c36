"""Pydantic request/response schemas for the Restrooms API.

These are separate from Protean commands (anti-corruption pattern). Field
names are snake_case in Python and camelCase on the wire, which is what the
web client sends and expects.

Request fields are all optional here: missing or blank values are rejected by
the domain with a 400, not by the framework with a 422.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitReviewRequest(CamelModel):
    location_name: str | None = None
    address: str | None = None
    city: str | None = None
    rating: int | None = None
    cleanliness: int | None = None
    accessibility: int | None = None
    supplies: int | None = None
    privacy: int | None = None
    comment: str | None = None


class VoteRequest(CamelModel):
    review_id: str | None = None
    vote_type: str | None = None  # "up" or "down"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReviewSchema(CamelModel):
    id: str
    location_name: str
    address: str = ""
    city: str
    rating: int
    cleanliness: int
    accessibility: int
    supplies: int
    privacy: int
    comment: str
    user_id: str
    username: str
    created_at: datetime
    upvotes: int = 0
    downvotes: int = 0

    @classmethod
    def from_review(cls, review) -> ReviewSchema:
        return cls(
            id=str(review.id),
            location_name=review.location_name,
            address=review.address or "",
            city=review.city,
            rating=review.rating,
            cleanliness=review.cleanliness,
            accessibility=review.accessibility,
            supplies=review.supplies,
            privacy=review.privacy,
            comment=review.comment,
            user_id=str(review.user_id),
            username=review.username or "",
            created_at=review.created_at,
            upvotes=review.upvotes or 0,
            downvotes=review.downvotes or 0,
        )


class LocationSchema(CamelModel):
    id: str
    name: str
    address: str = ""
    city: str
    average_rating: float
    total_reviews: int
    reviews: list[ReviewSchema] = []

    @classmethod
    def from_listing(cls, listing) -> LocationSchema:
        location = listing.location
        return cls(
            id=str(location.id),
            name=location.name,
            address=location.address or "",
            city=location.city,
            average_rating=location.average_rating or 0.0,
            total_reviews=location.total_reviews or 0,
            reviews=[ReviewSchema.from_review(review) for review in listing.reviews],
        )


class SubmitReviewResponse(CamelModel):
    status: str = "success"
    review: ReviewSchema
    message: str = "Review added successfully!"


class LocationsResponse(CamelModel):
    status: str = "success"
    locations: list[LocationSchema] = []
    message: str | None = None


class VoteResponse(CamelModel):
    status: str = "success"
    upvotes: int
    downvotes: int


class HealthResponse(CamelModel):
    status: str = "healthy"
    store: str = "connected"
    timestamp: datetime
