import os
from pathlib import Path
from types import SimpleNamespace

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def preparedness_bed():
    from preparedness.domain import preparedness

    bed = DomainFixture(preparedness)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(preparedness_bed):
    from preparedness.domain import preparedness
    from preparedness.utils.db import drop_db, setup_db

    setup_db(preparedness)

    yield

    drop_db(preparedness)


@pytest.fixture(autouse=True)
def _ctx(preparedness_bed):
    with preparedness_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from preparedness.notifications.channel import reset_channels
    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_channels()


# ---------------------------------------------------------------------------
# Shared world: one community, three neighbours, one stockpile line
# ---------------------------------------------------------------------------
@pytest.fixture
def neighbourhood():
    """Anna owns 10 liters of water; Bertil and Cecilia live in her community."""
    from preparedness.community.management import CreateCommunity, JoinCommunity
    from preparedness.inventory.store import InventoryStore
    from protean import current_domain

    community_id = current_domain.process(
        CreateCommunity(name="Storgatan 12", created_by="anna", display_name="Anna"),
        asynchronous=False,
    )
    for member_id, name in (("bertil", "Bertil"), ("cecilia", "Cecilia")):
        current_domain.process(
            JoinCommunity(community_id=community_id, member_id=member_id, display_name=name),
            asynchronous=False,
        )

    resource_id = InventoryStore().add_resource(
        owner_id="anna",
        name="Bottled water",
        category="water",
        quantity=10,
        unit="liters",
        shelf_life_days=365,
        is_recommended=True,
    )
    return SimpleNamespace(
        community_id=community_id,
        owner="anna",
        requester="bertil",
        other="cecilia",
        resource_id=resource_id,
    )


@pytest.fixture
def offer_id(neighbourhood):
    """Five of Anna's ten liters offered to the community."""
    from preparedness.sharing.registry import SharingRegistry

    return SharingRegistry().publish(
        actor_id=neighbourhood.owner,
        resource_id=neighbourhood.resource_id,
        community_id=neighbourhood.community_id,
        quantity=5,
    )
