"""
Field validators shared by the services.

Each validator checks a single value and raises ``ValidationError`` naming the
offending field. None of them mutate state.
"""
from decimal import Decimal, InvalidOperation
from typing import Any

from email_validator import EmailNotValidError
from email_validator import validate_email as check_email_syntax

from marketplace.core.errors import ValidationError
from marketplace.models.order import OrderStatus

MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 3


def validate_required(value: Any, field_name: str) -> None:
    if value is None or value == "":
        raise ValidationError(field_name, f"{field_name} is required")


def validate_email(email: str) -> None:
    """Syntax check only; no DNS lookup is made."""
    if not isinstance(email, str):
        raise ValidationError("email", "Invalid email format")
    try:
        check_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("email", "Invalid email format")


def validate_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password",
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )


def validate_username(username: str) -> None:
    if not username or len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            "username",
            f"Username must be at least {MIN_USERNAME_LENGTH} characters long",
        )


def validate_price(price: Any) -> Decimal:
    """Check that *price* is a number above zero and return it as a Decimal."""
    if isinstance(price, bool):
        raise ValidationError("price", "Price must be greater than 0")
    try:
        amount = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise ValidationError("price", "Price must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("price", "Price must be greater than 0")
    return amount


def validate_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity", "Quantity must be a positive integer")


def validate_order_status(status: Any) -> OrderStatus:
    """Coerce *status* to an ``OrderStatus`` or raise."""
    try:
        return OrderStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError("status", f"Invalid status. Must be: {allowed}")


def validate_pagination(page: Any, limit: Any) -> None:
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise ValidationError("page", "Page must be a positive integer")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError("limit", "Limit must be a positive integer")
