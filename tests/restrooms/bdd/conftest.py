"""Shared BDD fixtures and step definitions for the Restrooms domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import parsers, then


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("there is {count:d} location listed"))
@then(parsers.cfparse("there are {count:d} locations listed"))
def locations_listed(engine, count):
    assert len(engine.list_locations()) == count
