"""Application tests for concurrent submissions and votes through one engine."""

import threading

from restrooms.domain import restrooms

THREADS = 20


def _run_together(target, count=THREADS):
    """Start ``count`` threads calling ``target(i)`` at once; return any errors raised."""
    barrier = threading.Barrier(count)
    errors = []

    def worker(i):
        with restrooms.domain_context():
            barrier.wait()
            try:
                target(i)
            except Exception as exc:
                errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return errors


def _submit(engine, user_id, location_name="Joe's Diner", rating=3):
    return engine.submit_review(
        location_name=location_name,
        city="Springfield",
        rating=rating,
        cleanliness=3,
        accessibility=3,
        supplies=3,
        privacy=3,
        comment="ok",
        user_id=user_id,
    )


class TestConcurrentSubmissions:
    def test_same_location_accumulates_every_review(self, engine):
        errors = _run_together(lambda i: _submit(engine, f"user-{i:04d}", rating=1 + i % 5))
        assert errors == []

        [listing] = engine.list_locations()
        assert listing.location.total_reviews == THREADS
        assert len(set(listing.location.review_id_list)) == THREADS
        assert len(listing.reviews) == THREADS
        assert listing.location.average_rating == 3.0
        assert len(engine.locations.list_index()) == 1

    def test_case_variants_share_one_location(self, engine):
        names = ["Joe's Diner", "JOE'S DINER", "  joe's diner  "]
        errors = _run_together(lambda i: _submit(engine, f"user-{i:04d}", location_name=names[i % len(names)]))
        assert errors == []

        assert len(engine.locations.list_index()) == 1
        assert engine.list_locations()[0].location.total_reviews == THREADS

    def test_distinct_locations_all_indexed(self, engine):
        errors = _run_together(lambda i: _submit(engine, "user-0001", location_name=f"Place {i}"))
        assert errors == []

        assert len(engine.locations.list_index()) == THREADS
        assert engine.check_all() == {}


class TestConcurrentVotes:
    def _review_id(self, engine):
        review, _ = _submit(engine, "author-0001")
        return str(review.id)

    def test_upvotes_equal_number_of_voters(self, engine):
        review_id = self._review_id(engine)
        errors = _run_together(lambda i: engine.cast_vote(review_id, "up", f"voter-{i:04d}"))
        assert errors == []

        review = engine.reviews.get(review_id)
        assert (review.upvotes, review.downvotes) == (THREADS, 0)

    def test_mixed_votes_tally(self, engine):
        review_id = self._review_id(engine)
        errors = _run_together(
            lambda i: engine.cast_vote(review_id, "up" if i % 2 else "down", f"voter-{i:04d}")
        )
        assert errors == []

        review = engine.reviews.get(review_id)
        assert (review.upvotes, review.downvotes) == (THREADS // 2, THREADS // 2)

    def test_one_user_repeating_a_vote_toggles_consistently(self, engine):
        review_id = self._review_id(engine)
        errors = _run_together(lambda i: engine.cast_vote(review_id, "up", "voter-0001"))
        assert errors == []

        # An even number of identical casts ends with the vote withdrawn
        review = engine.reviews.get(review_id)
        assert (review.upvotes, review.downvotes) == (0, 0)
        assert engine.votes.get_vote("voter-0001", review_id) is None
