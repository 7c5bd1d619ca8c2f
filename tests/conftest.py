"""Root conftest: shared test configuration and fixtures.

Settings are pinned through the environment before any marketplace module is
imported: cheap bcrypt rounds, a fixed signing key, no log file, and no seed
data unless a test asks for it.
"""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FILE_PATH", "")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from marketplace.db.store import DataStore  # noqa: E402
from marketplace.main import create_app  # noqa: E402
from marketplace.models.token import TokenClaims  # noqa: E402
from marketplace.schemas.listing import ListingCreateInput  # noqa: E402
from marketplace.schemas.order import OrderCreateInput, ShippingAddressInput  # noqa: E402
from marketplace.schemas.user import UserCreateInput  # noqa: E402
from marketplace.services.event_bus import EventBus  # noqa: E402
from marketplace.services.listing_service import ListingService  # noqa: E402
from marketplace.services.order_service import OrderService  # noqa: E402
from marketplace.services.user_service import UserService  # noqa: E402


def claims_for(user) -> TokenClaims:
    return TokenClaims(id=user.id, email=user.email, username=user.username)


def address_input() -> ShippingAddressInput:
    return ShippingAddressInput(
        street="789 Test Ave",
        city="Test City",
        state="TS",
        zip_code="12345",
        country="USA",
    )


@pytest.fixture
def store():
    return DataStore()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def seller(store):
    return UserService(store).register_user(
        UserCreateInput(username="seller", email="seller@example.com", password="secret1")
    )


@pytest.fixture
def buyer(store):
    return UserService(store).register_user(
        UserCreateInput(username="buyer", email="buyer@example.com", password="secret2")
    )


@pytest.fixture
def listing(store, seller):
    return ListingService(store).create_listing(
        ListingCreateInput(title="Desk Lamp", description="Brass lamp", price=100.0),
        claims_for(seller),
    )


@pytest.fixture
def order(store, buyer, listing):
    return OrderService(store).create_order(
        OrderCreateInput(listing_id=listing.id, quantity=3, shipping_address=address_input()),
        claims_for(buyer),
    )


@pytest.fixture
def client(store, event_bus):
    """HTTP client bound to an app over the test's own store."""
    app = create_app(store=store, event_bus=event_bus)
    with TestClient(app) as c:
        yield c
