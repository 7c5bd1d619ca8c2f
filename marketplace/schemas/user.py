"""
GraphQL schemas for User requests and responses.
The response type has no password field at all, so a hash can never leak.
"""
from datetime import datetime
from typing import Optional

import strawberry

from marketplace.models.user import User


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

@strawberry.input
class UserCreateInput:
    username: str
    email: str
    password: str


@strawberry.input
class UserUpdateInput:
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


@strawberry.input
class UserLoginInput:
    email: str
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

@strawberry.type(name="User")
class UserType:
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@strawberry.type
class AuthPayload:
    token: str
    user: UserType
