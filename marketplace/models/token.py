"""
Identity claims embedded in an access token.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class TokenClaims:
    id: int
    email: str
    username: str

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenClaims":
        """Build claims from a decoded JWT payload (raises KeyError/ValueError if malformed)."""
        return cls(
            id=int(payload["id"]),
            email=str(payload["email"]),
            username=str(payload["username"]),
        )
