"""SubmitReview: report on a location's restroom.

The location is found (or registered) from the submitted name and city; the
aggregation engine links the new review and refreshes the location average.
"""

from protean.fields import Identifier, Integer, String, Text
from protean.utils.mixins import handle

from restrooms.aggregation import get_engine
from restrooms.domain import restrooms
from restrooms.review.review import Review


@restrooms.command(part_of="Review")
class SubmitReview:
    location_name = String(required=True, max_length=255)
    address = String(max_length=500)
    city = String(required=True, max_length=255)
    rating = Integer(required=True)
    cleanliness = Integer(required=True)
    accessibility = Integer(required=True)
    supplies = Integer(required=True)
    privacy = Integer(required=True)
    comment = Text(required=True)
    user_id = Identifier(required=True)


@restrooms.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        review, _ = get_engine().submit_review(
            location_name=command.location_name,
            address=command.address,
            city=command.city,
            rating=command.rating,
            cleanliness=command.cleanliness,
            accessibility=command.accessibility,
            supplies=command.supplies,
            privacy=command.privacy,
            comment=command.comment,
            user_id=command.user_id,
        )
        return str(review.id)
