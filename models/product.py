import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    """Catalog entry. Loaded from the catalog source and never edited in-app."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    price: Decimal = Field(ge=0)
    original_price: Optional[Decimal] = None
    image_url: str = ""
    category: str
    subcategory: Optional[str] = None
    unit: str
    brand: Optional[str] = None
    rating: float = Field(default=4.0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    in_stock: bool = True
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def discount_percentage(self) -> Optional[int]:
        if self.original_price is None or self.original_price <= self.price:
            return None
        return int((self.original_price - self.price) / self.original_price * 100)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "original_price": float(self.original_price) if self.original_price is not None else None,
            "discount_percentage": self.discount_percentage,
            "image_url": self.image_url,
            "category": self.category,
            "subcategory": self.subcategory,
            "unit": self.unit,
            "brand": self.brand,
            "rating": self.rating,
            "review_count": self.review_count,
            "in_stock": self.in_stock,
            "tags": list(self.tags),
        }


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    icon: str
    color: str
    subcategories: List[str] = Field(default_factory=list)

    def to_dict(self):
        return self.model_dump()
