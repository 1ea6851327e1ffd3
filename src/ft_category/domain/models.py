"""Domain models for ft_category: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Category:
    id: int
    name: str                  # always lowercase
    description: str | None
    color: str | None
    is_active: bool = True     # False = soft-deleted
    created_at: datetime | None = None
    updated_at: datetime | None = None


def normalize_name(name: str) -> str:
    """Category names are unique case-insensitively; stored lowercase."""
    return name.strip().lower()
