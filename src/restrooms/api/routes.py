"""FastAPI routes for the Restrooms bounded context.

Writes are translated from Pydantic schemas into Protean commands; the
listing is read straight from the aggregation engine.
"""

import uuid
from datetime import UTC, datetime

from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from restrooms.aggregation import get_engine
from restrooms.api.schemas import (
    HealthResponse,
    LocationSchema,
    LocationsResponse,
    ReviewSchema,
    SubmitReviewRequest,
    SubmitReviewResponse,
    VoteRequest,
    VoteResponse,
)
from restrooms.review.submission import SubmitReview
from restrooms.review.voting import CastVote
from restrooms.store.base import StorageError
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)

api_router = APIRouter(prefix="/api", tags=["restrooms"])

EMPTY_LISTING_MESSAGE = "No bathroom reviews yet. Be the first to add one!"


def resolve_user_id(header_value: str | None) -> str:
    """Caller-supplied user id, or a throwaway anonymous one."""
    if header_value and header_value.strip():
        return header_value.strip()
    return f"anonymous_{uuid.uuid4().hex[:9]}"


@api_router.get("/health", response_model=HealthResponse)
async def health():
    """Round-trip a probe key through the store."""
    engine = get_engine()
    probe_key = engine.keys.health_probe()
    probe_value = f"health_check_{datetime.now(UTC).timestamp()}".encode("utf-8")

    try:
        engine.store.set(probe_key, probe_value)
        echoed = engine.store.get(probe_key)
        engine.store.delete(probe_key)
    except StorageError as exc:
        logger.error("Health check failed", reason=str(exc))
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": str(exc), "timestamp": datetime.now(UTC).isoformat()},
        )

    if echoed != probe_value:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": "Store returned a different value than was written",
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    return HealthResponse(timestamp=datetime.now(UTC))


@api_router.get("/locations", response_model=LocationsResponse)
async def list_locations(city: str | None = Query(default=None)) -> LocationsResponse:
    """All reviewed locations, worst average rating first.

    ``city`` narrows the result to locations whose city contains it,
    ignoring case.
    """
    listings = get_engine().list_locations()

    if city and city.strip():
        needle = city.strip().lower()
        listings = [listing for listing in listings if needle in listing.location.city.lower()]

    if not listings:
        return LocationsResponse(locations=[], message=EMPTY_LISTING_MESSAGE)

    return LocationsResponse(locations=[LocationSchema.from_listing(listing) for listing in listings])


@api_router.post("/reviews", status_code=201, response_model=SubmitReviewResponse)
async def submit_review(
    body: SubmitReviewRequest,
    x_user_id: str | None = Header(default=None),
) -> SubmitReviewResponse:
    """Submit a review, creating the location on first mention."""
    command = SubmitReview(
        location_name=body.location_name,
        address=body.address,
        city=body.city,
        rating=body.rating,
        cleanliness=body.cleanliness,
        accessibility=body.accessibility,
        supplies=body.supplies,
        privacy=body.privacy,
        comment=body.comment,
        user_id=resolve_user_id(x_user_id),
    )
    review_id = current_domain.process(command, asynchronous=False)

    review = get_engine().reviews.get(review_id)
    if review is None:
        raise ObjectNotFoundError({"_entity": f"Review with id {review_id} does not exist"})

    return SubmitReviewResponse(review=ReviewSchema.from_review(review))


@api_router.post("/vote", response_model=VoteResponse)
async def vote(
    body: VoteRequest,
    x_user_id: str | None = Header(default=None),
) -> VoteResponse:
    """Cast, switch or withdraw an up/down vote on a review."""
    command = CastVote(
        review_id=body.review_id,
        vote_type=body.vote_type,
        user_id=resolve_user_id(x_user_id),
    )
    counts = current_domain.process(command, asynchronous=False)
    return VoteResponse(upvotes=counts["upvotes"], downvotes=counts["downvotes"])
