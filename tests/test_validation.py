"""Validation: field validators raise VALIDATION_ERROR naming the field."""

from decimal import Decimal

import pytest

from marketplace.core.errors import ErrorCode, ValidationError
from marketplace.core import validation
from marketplace.models.order import OrderStatus


@pytest.mark.parametrize(
    "email", ["john@example.com", "a.b@sub.domain.org", "first+tag@example.co.uk"]
)
def test_valid_emails_pass(email):
    validation.validate_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "invalid-email",
        "no@tld",
        "spa ce@x.com",
        "@x.com",
        "",
        "two@@example.com",
        # accepted by a naive local@domain.tld pattern
        "john..doe@example.com",
        ".leading@example.com",
    ],
)
def test_malformed_emails_rejected(email):
    with pytest.raises(ValidationError) as exc:
        validation.validate_email(email)
    assert exc.value.field == "email"
    assert exc.value.code == ErrorCode.VALIDATION_ERROR


def test_password_needs_six_characters():
    validation.validate_password("123456")
    with pytest.raises(ValidationError) as exc:
        validation.validate_password("12345")
    assert exc.value.details == {
        "field": "password",
        "message": "Password must be at least 6 characters long",
    }


def test_username_needs_three_characters():
    validation.validate_username("abc")
    with pytest.raises(ValidationError) as exc:
        validation.validate_username("ab")
    assert exc.value.field == "username"


def test_price_must_be_positive():
    assert validation.validate_price(19.99) == Decimal("19.99")
    for bad in (0, -1, -0.01):
        with pytest.raises(ValidationError) as exc:
            validation.validate_price(bad)
        assert exc.value.message == "Price must be greater than 0"


def test_price_rejects_non_numbers():
    with pytest.raises(ValidationError):
        validation.validate_price("cheap")
    with pytest.raises(ValidationError):
        validation.validate_price(float("nan"))


def test_quantity_must_be_positive_integer():
    validation.validate_quantity(1)
    for bad in (0, -3, 1.5, "2", True):
        with pytest.raises(ValidationError) as exc:
            validation.validate_quantity(bad)
        assert exc.value.field == "quantity"


def test_order_status_accepts_the_five_values():
    for status in ("PENDING", "CONFIRMED", "SHIPPED", "DELIVERED", "CANCELLED"):
        assert validation.validate_order_status(status) == OrderStatus(status)


def test_order_status_rejects_unknown_value():
    with pytest.raises(ValidationError) as exc:
        validation.validate_order_status("LOST")
    assert exc.value.message == (
        "Invalid status. Must be: PENDING, CONFIRMED, SHIPPED, DELIVERED, CANCELLED"
    )


@pytest.mark.parametrize("value", [None, ""])
def test_required_rejects_missing(value):
    with pytest.raises(ValidationError) as exc:
        validation.validate_required(value, "title")
    assert exc.value.message == "title is required"


def test_required_accepts_zero():
    validation.validate_required(0, "quantity")


def test_pagination_rejects_non_positive_values():
    validation.validate_pagination(1, 10)
    with pytest.raises(ValidationError) as exc:
        validation.validate_pagination(0, 10)
    assert exc.value.field == "page"
    with pytest.raises(ValidationError) as exc:
        validation.validate_pagination(1, 0)
    assert exc.value.field == "limit"
