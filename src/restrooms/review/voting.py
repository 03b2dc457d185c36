"""CastVote: up/down vote on a review.

One vote per user per review. Casting the same type again withdraws the vote;
casting the other type switches it.
"""

from protean.fields import Identifier, String
from protean.utils.mixins import handle

from restrooms.aggregation import get_engine
from restrooms.domain import restrooms
from restrooms.review.review import Review, VoteType


@restrooms.command(part_of="Review")
class CastVote:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vote_type = String(required=True, choices=VoteType)  # "up" or "down"


@restrooms.command_handler(part_of=Review)
class CastVoteHandler:
    @handle(CastVote)
    def cast_vote(self, command):
        upvotes, downvotes = get_engine().cast_vote(
            review_id=command.review_id,
            vote_type=command.vote_type,
            user_id=command.user_id,
        )
        return {"upvotes": upvotes, "downvotes": downvotes}
