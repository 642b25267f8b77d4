import json
import logging
import random
from typing import Iterable, List, Optional

from pydantic import ValidationError as SchemaError

from app.services.errors import StorageError
from app.services.sample_catalog import CATEGORIES, sample_products
from models.product import Product

logger = logging.getLogger(__name__)

CATALOG_KEY = "catalog"
FEATURED_MIN_RATING = 4.5


def search(products: List[Product], query: Optional[str]) -> List[Product]:
    """Case-insensitive substring match on name, category or any single tag.

    A blank query returns the products unchanged. Matches keep input order.
    """
    if not query or not query.strip():
        return list(products)
    needle = query.lower()
    return [
        p for p in products
        if needle in p.name.lower()
        or needle in p.category.lower()
        or any(needle in tag.lower() for tag in p.tags)
    ]


def by_category(products: Iterable[Product], category: str) -> List[Product]:
    return [p for p in products if p.category == category]


def featured(products: Iterable[Product], limit: int = 6, rng: Optional[random.Random] = None) -> List[Product]:
    top = [p for p in products if p.rating >= FEATURED_MIN_RATING]
    rng = rng or random
    return rng.sample(top, min(limit, len(top)))


def decode_products(raw) -> List[Product]:
    if isinstance(raw, dict):
        raw = raw.get("products")
    if not isinstance(raw, list):
        raise ValueError("catalog must be a list of products")
    return [Product.model_validate(item) for item in raw]


class Catalog:
    def __init__(self, products: Optional[List[Product]] = None, categories=None):
        self._products = list(products or [])
        self._index = {p.id: p for p in self._products}
        self.categories = list(categories or CATEGORIES)
        self.error_message = None

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    def replace(self, products: List[Product]) -> None:
        self._products = list(products)
        self._index = {p.id: p for p in self._products}

    def load(self, storage, path: Optional[str] = None) -> None:
        """Load from ``path`` or storage, seeding storage when it is empty.

        Anything that cannot be decoded falls back to the built-in catalog.
        """
        try:
            if path:
                with open(path, encoding="utf-8") as fh:
                    raw = json.load(fh)
            else:
                raw = storage.load(CATALOG_KEY)
                if raw is None:
                    self._seed(storage)
                    return
            self.replace(decode_products(raw))
            logger.info("Loaded %d catalog products", len(self._products))
        except (OSError, ValueError, SchemaError, StorageError) as e:
            logger.warning("Catalog unreadable, using sample catalog: %s", e)
            self.error_message = "Could not load products, showing sample catalog"
            self.replace(sample_products())

    def _seed(self, storage) -> None:
        self.replace(sample_products())
        try:
            storage.save(CATALOG_KEY, self.snapshot())
            logger.info("Seeded sample catalog (%d products)", len(self._products))
        except StorageError as e:
            logger.error("Failed to seed catalog: %s", e)
            self.error_message = str(e)

    def snapshot(self):
        return [p.model_dump(mode="json") for p in self._products]

    def get(self, product_id: str) -> Optional[Product]:
        return self._index.get(product_id)

    def search(self, query: Optional[str]) -> List[Product]:
        return search(self._products, query)

    def by_category(self, category: str) -> List[Product]:
        return by_category(self._products, category)

    def featured(self, limit: int = 6, rng: Optional[random.Random] = None) -> List[Product]:
        return featured(self._products, limit, rng)
