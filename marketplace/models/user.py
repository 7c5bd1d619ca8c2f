"""
Domain model (plain Python dataclass) representing a stored User record.
This is the internal representation used across service and repository layers;
it is never returned to API clients as-is because it carries the password hash.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: int
    username: str
    email: str
    hashed_password: str
    created_at: datetime
    updated_at: datetime
