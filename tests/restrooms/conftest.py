import pytest
from protean.integrations.pytest import DomainFixture
from restrooms.store.memory import MemoryStore
from restrooms.store.registry import use_store
from restrooms.utils.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def _logging():
    """Configure logging as the entry points do (WARNING under PROTEAN_ENV=test)."""
    configure_logging()


@pytest.fixture(scope="session")
def restrooms_bed():
    from restrooms.domain import restrooms

    bed = DomainFixture(restrooms)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(restrooms_bed):
    with restrooms_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def store():
    """A fresh, empty store for every test."""
    return use_store(MemoryStore())


@pytest.fixture()
def engine(store):
    from restrooms.aggregation import get_engine

    return get_engine()
