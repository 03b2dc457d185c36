"""Vote ledger: which way each user voted on each review.

One key per (user, review). No key means no vote.
"""

from restrooms.review.review import VoteType
from restrooms.store.base import KeyValueStore
from restrooms.store.keys import KeyLayout
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)


class VoteLedger:
    def __init__(self, store: KeyValueStore, keys: KeyLayout | None = None):
        self.store = store
        self.keys = keys or KeyLayout()

    def get_vote(self, user_id: str, review_id: str) -> VoteType | None:
        payload = self.store.get(self.keys.vote(user_id, review_id))
        if payload is None:
            return None

        try:
            return VoteType(payload.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            logger.warning("Unreadable vote record, treating as no vote", user_id=user_id, review_id=review_id)
            return None

    def set_vote(self, user_id: str, review_id: str, vote_type: VoteType) -> None:
        self.store.set(self.keys.vote(user_id, review_id), VoteType(vote_type).value.encode("utf-8"))

    def clear_vote(self, user_id: str, review_id: str) -> None:
        self.store.delete(self.keys.vote(user_id, review_id))
