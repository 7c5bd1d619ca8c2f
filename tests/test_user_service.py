"""User service: registration, profile updates, deletion and its cascade."""

import threading

import pytest

from conftest import address_input, claims_for
from marketplace.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from marketplace.core.security import verify_password
from marketplace.schemas.listing import ListingCreateInput
from marketplace.schemas.order import OrderCreateInput
from marketplace.schemas.user import UserCreateInput, UserUpdateInput
from marketplace.repositories.session_repository import SessionRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.services.listing_service import ListingService
from marketplace.services.order_service import OrderService
from marketplace.services.user_service import UserService


def _register(store, username, email, password="password123"):
    return UserService(store).register_user(
        UserCreateInput(username=username, email=email, password=password)
    )


def test_register_hashes_password_and_assigns_increasing_ids(store):
    first = _register(store, "alice", "alice@example.com")
    second = _register(store, "bobby", "bob@example.com")
    assert second.id > first.id
    assert first.hashed_password != "password123"
    assert verify_password("password123", first.hashed_password)


def test_register_duplicate_email_conflicts(store):
    _register(store, "alice", "alice@example.com")
    with pytest.raises(ConflictError) as exc:
        _register(store, "alice2", "alice@example.com")
    assert exc.value.message == "Email already exists"
    assert exc.value.details["field"] == "email"



def test_register_conflict_is_caught_at_insert(store, monkeypatch):
    _register(store, "alice", "alice@example.com")
    # the lookup misses, as when a parallel registration lands between check and insert
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)
    with pytest.raises(ConflictError):
        _register(store, "alice2", "alice@example.com")
    assert len(store.users) == 1


def test_parallel_registrations_with_same_email_admit_one(store):
    barrier = threading.Barrier(4)
    outcomes = []

    def register(n):
        barrier.wait()
        try:
            _register(store, f"racer{n}", "race@example.com")
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=register, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict"] * 3 + ["ok"]
    assert len(store.users) == 1

@pytest.mark.parametrize(
    "username,email,password,field",
    [
        ("ab", "ok@example.com", "password123", "username"),
        ("abc", "invalid-email", "password123", "email"),
        ("abc", "ok@example.com", "123", "password"),
        ("", "ok@example.com", "password123", "username"),
    ],
)
def test_register_validates_fields(store, username, email, password, field):
    with pytest.raises(ValidationError) as exc:
        _register(store, username, email, password)
    assert exc.value.field == field


def test_get_missing_user_is_not_found(store):
    with pytest.raises(NotFoundError) as exc:
        UserService(store).get_user(99999)
    assert exc.value.message == "User not found"


def test_update_own_profile(store, seller):
    updated = UserService(store).update_user(
        seller.id,
        UserUpdateInput(username="new_name", password="another1"),
        claims_for(seller),
    )
    assert updated.username == "new_name"
    assert updated.email == seller.email
    assert verify_password("another1", updated.hashed_password)


def test_update_email_to_own_address_is_allowed(store, seller):
    updated = UserService(store).update_user(
        seller.id, UserUpdateInput(email=seller.email), claims_for(seller)
    )
    assert updated.email == seller.email


def test_update_email_taken_by_other_conflicts(store, seller, buyer):
    with pytest.raises(ConflictError):
        UserService(store).update_user(
            seller.id, UserUpdateInput(email=buyer.email), claims_for(seller)
        )


def test_update_email_conflict_is_caught_at_write(store, seller, buyer, monkeypatch):
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)
    with pytest.raises(ConflictError):
        UserService(store).update_user(
            seller.id, UserUpdateInput(email=buyer.email), claims_for(seller)
        )
    assert store.users.get(seller.id).email == seller.email


def test_update_other_user_forbidden(store, seller, buyer):
    with pytest.raises(ForbiddenError):
        UserService(store).update_user(
            buyer.id, UserUpdateInput(username="hacked"), claims_for(seller)
        )


def test_update_requires_auth(store, seller):
    with pytest.raises(UnauthenticatedError):
        UserService(store).update_user(seller.id, UserUpdateInput(username="x_y_z"), None)


def test_update_validates_new_values(store, seller):
    with pytest.raises(ValidationError):
        UserService(store).update_user(
            seller.id, UserUpdateInput(email="nope"), claims_for(seller)
        )


def test_delete_other_user_forbidden(store, seller, buyer):
    with pytest.raises(ForbiddenError):
        UserService(store).delete_user(buyer.id, claims_for(seller))


def test_delete_cascades_to_listings_orders_and_sessions(store, seller, buyer):
    listing_service = ListingService(store)
    order_service = OrderService(store)
    own_listing = listing_service.create_listing(
        ListingCreateInput(title="Chair", description="Oak", price=40.0), claims_for(buyer)
    )
    sellers_listing = listing_service.create_listing(
        ListingCreateInput(title="Table", description="Pine", price=90.0), claims_for(seller)
    )
    order_service.create_order(
        OrderCreateInput(listing_id=sellers_listing.id, quantity=1, shipping_address=address_input()),
        claims_for(buyer),
    )
    SessionRepository(store).add("buyer-token", buyer.id)

    UserService(store).delete_user(buyer.id, claims_for(buyer))

    assert store.users.get(buyer.id) is None
    assert store.listings.get(own_listing.id) is None
    assert store.listings.get(sellers_listing.id) is not None
    assert store.orders.select(lambda o: o.user_id == buyer.id) == []
    assert not SessionRepository(store).is_active("buyer-token")
