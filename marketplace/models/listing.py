"""
Domain model representing a stored Listing record.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class ListingCondition(str, Enum):
    NEW = "NEW"
    LIKE_NEW = "LIKE_NEW"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    USED = "USED"


@dataclass
class Listing:
    id: int
    title: str
    description: str
    price: Decimal
    user_id: int
    created_at: datetime
    updated_at: datetime
    category: Optional[str] = None
    condition: Optional[ListingCondition] = None
    location: Optional[str] = None
    images: list[str] = field(default_factory=list)
