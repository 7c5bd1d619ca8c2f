"""
Sample data seeder – fills a fresh store with demo users, listings and an order.

⚠️  FOR DEVELOPMENT ONLY.
    Disable with SEED_SAMPLE_DATA=false before exposing the API publicly.

Demo credentials (both accounts):
    email    : john@example.com / jane@example.com
    password : password
"""
from decimal import Decimal
import logging

from marketplace.core.security import hash_password
from marketplace.db.store import DataStore
from marketplace.models.listing import ListingCondition
from marketplace.models.order import ShippingAddress
from marketplace.repositories.listing_repository import ListingRepository
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Seed data – change these values freely during development
# ---------------------------------------------------------------------------
SAMPLE_PASSWORD = "password"

SAMPLE_USERS = [
    {"username": "john_doe", "email": "john@example.com"},
    {"username": "jane_smith", "email": "jane@example.com"},
]

SAMPLE_LISTINGS = [
    {
        "title": "iPhone 13 Pro Max",
        "description": "Brand new, still in box",
        "price": Decimal("999.99"),
        "category": "electronics",
        "condition": ListingCondition.NEW,
        "location": "New York, NY",
        "images": ["iphone1.jpg", "iphone2.jpg"],
        "owner": "john@example.com",
    },
    {
        "title": "Vintage Guitar",
        "description": "Classic acoustic guitar in excellent condition",
        "price": Decimal("450.00"),
        "category": "music",
        "condition": ListingCondition.GOOD,
        "location": "Los Angeles, CA",
        "images": ["guitar1.jpg"],
        "owner": "jane@example.com",
    },
]


def seed_sample_data(store: DataStore) -> None:
    """Insert the demo records. Intended for a freshly constructed store."""
    users = UserRepository(store)
    listings = ListingRepository(store)
    orders = OrderRepository(store)

    hashed = hash_password(SAMPLE_PASSWORD)
    by_email = {}
    for entry in SAMPLE_USERS:
        user = users.create(
            username=entry["username"],
            email=entry["email"],
            hashed_password=hashed,
        )
        by_email[user.email] = user

    created_listings = []
    for entry in SAMPLE_LISTINGS:
        fields = dict(entry)
        owner = by_email[fields.pop("owner")]
        created_listings.append(listings.create(user_id=owner.id, **fields))

    iphone = created_listings[0]
    orders.create(
        user_id=by_email["jane@example.com"].id,
        listing_id=iphone.id,
        quantity=1,
        total_price=iphone.price,
        shipping_address=ShippingAddress(
            street="123 Main St",
            city="New York",
            state="NY",
            zip_code="10001",
            country="USA",
        ),
        buyer_notes="Please deliver after 5 PM",
    )
    logger.info(
        "Seeder: created %s users, %s listings and 1 order.",
        len(by_email),
        len(created_listings),
    )
