"""Listing service: creation, search filters, owner-only edits."""

from decimal import Decimal

import pytest

from conftest import claims_for
from marketplace.core.errors import (
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from marketplace.models.listing import ListingCondition
from marketplace.schemas.listing import (
    ListingCreateInput,
    ListingFilterInput,
    ListingUpdateInput,
)
from marketplace.services.event_bus import NEW_LISTING
from marketplace.services.listing_service import ListingService


def _create(store, owner, **overrides):
    fields = {"title": "Item", "description": "Something", "price": 10.0}
    fields.update(overrides)
    return ListingService(store).create_listing(ListingCreateInput(**fields), claims_for(owner))


def test_create_sets_owner_and_decimal_price(store, seller):
    listing = _create(store, seller, title="Test Laptop", price=1299.99, category="electronics",
                      condition=ListingCondition.NEW)
    assert listing.user_id == seller.id
    assert listing.price == Decimal("1299.99")
    assert listing.condition == ListingCondition.NEW
    assert listing.images == []


def test_create_turns_images_into_placeholders(store, seller):
    listing = _create(store, seller, images=["front.png", "back.png"])
    assert len(listing.images) == 2
    assert all(ref.startswith("listing_") and ref.endswith(".jpg") for ref in listing.images)
    assert listing.images[0].endswith("_0.jpg")
    assert listing.images[1].endswith("_1.jpg")


def test_create_requires_auth(store):
    with pytest.raises(UnauthenticatedError):
        ListingService(store).create_listing(
            ListingCreateInput(title="x", description="y", price=1.0), None
        )


@pytest.mark.parametrize(
    "overrides,field",
    [({"title": ""}, "title"), ({"description": ""}, "description"), ({"price": 0.0}, "price"),
     ({"price": -5.0}, "price")],
)
def test_create_validates(store, seller, overrides, field):
    with pytest.raises(ValidationError) as exc:
        _create(store, seller, **overrides)
    assert exc.value.field == field


def test_create_publishes_new_listing(store, seller, event_bus, monkeypatch):
    published = []
    monkeypatch.setattr(event_bus, "publish", lambda topic, payload: published.append((topic, payload)))
    listing = ListingService(store, event_bus).create_listing(
        ListingCreateInput(title="Bike", description="Red", price=200.0), claims_for(seller)
    )
    assert published == [(NEW_LISTING, listing)]


def test_get_missing_listing_is_not_found(store):
    with pytest.raises(NotFoundError) as exc:
        ListingService(store).get_listing(5)
    assert exc.value.details == "Listing with ID 5 does not exist"


def test_filters_combine_with_and(store, seller):
    _create(store, seller, title="iPhone 13", description="Phone", price=999.99,
            category="electronics", condition=ListingCondition.NEW)
    _create(store, seller, title="Phone case", description="Silicone", price=15.0,
            category="accessories", condition=ListingCondition.NEW)
    _create(store, seller, title="Guitar", description="Acoustic, pairs well with a PHONE tuner",
            price=450.0, category="music", condition=ListingCondition.GOOD)

    service = ListingService(store)
    titles = lambda rows: [r.title for r in rows]  # noqa: E731

    assert titles(service.list_listings(ListingFilterInput(search="phone"))) == [
        "iPhone 13", "Phone case", "Guitar",
    ]
    assert titles(service.list_listings(ListingFilterInput(search="phone", price_max=500))) == [
        "Phone case", "Guitar",
    ]
    assert titles(service.list_listings(ListingFilterInput(price_min=450, price_max=999.99))) == [
        "iPhone 13", "Guitar",
    ]
    assert titles(service.list_listings(ListingFilterInput(category="music"))) == ["Guitar"]
    assert titles(service.list_listings(ListingFilterInput(condition=ListingCondition.NEW))) == [
        "iPhone 13", "Phone case",
    ]
    assert len(service.list_listings()) == 3
    assert len(service.list_listings(ListingFilterInput())) == 3


def test_owner_updates_listing(store, seller, listing):
    updated = ListingService(store).update_listing(
        listing.id, ListingUpdateInput(price=120.5, location="Berlin"), claims_for(seller)
    )
    assert updated.price == Decimal("120.5")
    assert updated.location == "Berlin"
    assert updated.title == listing.title


def test_update_rejects_bad_price(store, seller, listing):
    with pytest.raises(ValidationError):
        ListingService(store).update_listing(
            listing.id, ListingUpdateInput(price=0.0), claims_for(seller)
        )


def test_non_owner_cannot_update_or_delete(store, buyer, listing):
    service = ListingService(store)
    with pytest.raises(ForbiddenError):
        service.update_listing(listing.id, ListingUpdateInput(title="Mine"), claims_for(buyer))
    with pytest.raises(ForbiddenError):
        service.delete_listing(listing.id, claims_for(buyer))


def test_missing_listing_reports_not_found_before_forbidden(store, buyer):
    service = ListingService(store)
    with pytest.raises(NotFoundError):
        service.update_listing(404, ListingUpdateInput(title="x"), claims_for(buyer))
    with pytest.raises(NotFoundError):
        service.delete_listing(404, claims_for(buyer))


def test_owner_deletes_listing(store, seller, listing):
    ListingService(store).delete_listing(listing.id, claims_for(seller))
    assert store.listings.get(listing.id) is None
