"""Application tests for the maintenance CLI commands."""

import json

from manage import check, locate
from restrooms.location.identity import derive_location_id


def _submit(engine, location_name="Joe's Diner", rating=3):
    return engine.submit_review(
        location_name=location_name,
        city="Springfield",
        rating=rating,
        cleanliness=3,
        accessibility=3,
        supplies=3,
        privacy=3,
        comment="ok",
        user_id="user-0001",
    )


class TestCheckCommand:
    def test_consistent_store(self, engine, capsys):
        _submit(engine)
        _submit(engine, location_name="Other")

        assert check() == 0
        assert capsys.readouterr().out.strip() == "All locations consistent."

    def test_empty_store_is_consistent(self, engine, capsys):
        assert check() == 0

    def test_reports_each_problem_location(self, engine, store, capsys):
        review, location = _submit(engine)
        _submit(engine, location_name="Other")
        store.delete(engine.keys.review(str(review.id)))

        assert check() == 1
        out = capsys.readouterr().out
        assert f"{location.id}:" in out
        assert f"  - unresolvable review ids: {review.id}" in out

    def test_reports_drifted_count(self, engine, store, capsys):
        _, location = _submit(engine)
        key = engine.keys.location(str(location.id))
        record = json.loads(store.get(key))
        record["total_reviews"] = 4
        store.set(key, json.dumps(record).encode("utf-8"))

        assert check([str(location.id)]) == 1
        assert "total_reviews is 4 but 1 review ids are linked" in capsys.readouterr().out

    def test_selected_locations_only(self, engine, store, capsys):
        review, broken = _submit(engine)
        _, healthy = _submit(engine, location_name="Other")
        store.delete(engine.keys.review(str(review.id)))

        assert check([str(healthy.id)]) == 0
        assert check([str(broken.id)]) == 1

    def test_unknown_location_is_reported(self, engine, capsys):
        assert check(["nope"]) == 1
        assert "location nope has no readable record" in capsys.readouterr().out


class TestLocateCommand:
    def test_prints_derived_id(self, capsys):
        assert locate("Joe's Diner", "Springfield") == derive_location_id("Joe's Diner", "Springfield")
        assert capsys.readouterr().out.strip() == derive_location_id("Joe's Diner", "Springfield")
