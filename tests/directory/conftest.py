import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def directory_bed():
    from directory.domain import directory
    from directory.utils.db import drop_db, setup_db

    bed = DomainFixture(directory)
    bed.setup()
    setup_db(directory)
    yield bed
    drop_db(directory)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(directory_bed):
    with directory_bed.domain_context():
        yield

        # Clear all databases and drain the event store between tests
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
