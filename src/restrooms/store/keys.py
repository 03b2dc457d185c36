"""Key layout of the aggregation store.

The store has no schema beyond these key shapes:

    {prefix}:location:{location_id}      Location record (JSON)
    {prefix}:review:{review_id}          Review record (JSON)
    {prefix}:locations:list              Location index (JSON array, newest first)
    {prefix}:vote:{user_id}:{review_id}  Vote record ("up" / "down")
"""

from dataclasses import dataclass

from restrooms.config import DEFAULT_KEY_PREFIX


@dataclass(frozen=True)
class KeyLayout:
    prefix: str = DEFAULT_KEY_PREFIX

    def location(self, location_id: str) -> str:
        return f"{self.prefix}:location:{location_id}"

    def review(self, review_id: str) -> str:
        return f"{self.prefix}:review:{review_id}"

    def location_index(self) -> str:
        return f"{self.prefix}:locations:list"

    def vote(self, user_id: str, review_id: str) -> str:
        return f"{self.prefix}:vote:{user_id}:{review_id}"

    def health_probe(self) -> str:
        return f"{self.prefix}:health:test"
