import json
import random

from app.services.catalog import CATALOG_KEY, Catalog, by_category, featured, search
from app.services.errors import StorageError
from app.services.sample_catalog import sample_products
from app.services.storage import MemoryStore
from conftest import make_product


PRODUCTS = sample_products()


def ids(products):
    return [p.id for p in products]


def test_blank_query_returns_everything_in_order():
    assert ids(search(PRODUCTS, "")) == ids(PRODUCTS)
    assert ids(search(PRODUCTS, "   ")) == ids(PRODUCTS)
    assert ids(search(PRODUCTS, None)) == ids(PRODUCTS)


def test_search_name_is_case_insensitive():
    assert ids(search(PRODUCTS, "BANANA")) == ["p001"]


def test_search_matches_category():
    assert ids(search(PRODUCTS, "dairy")) == ["p006", "p007", "p008", "p009"]


def test_search_matches_a_single_tag():
    assert ids(search(PRODUCTS, "omega")) == ["p011"]
    # tags are matched one at a time, never joined
    assert search(PRODUCTS, "fresh organic") == []


def test_search_keeps_input_order():
    reversed_products = list(reversed(PRODUCTS))
    found = search(reversed_products, "fresh")
    assert ids(found) == [pid for pid in ids(reversed_products) if pid in set(ids(found))]
    assert len(found) > 1


def test_by_category_is_exact_and_case_sensitive():
    assert ids(by_category(PRODUCTS, "Dairy & Eggs")) == ["p006", "p007", "p008", "p009"]
    assert by_category(PRODUCTS, "dairy & eggs") == []
    assert by_category(PRODUCTS, "Dairy") == []


def test_featured_only_top_rated_and_limited():
    picks = featured(PRODUCTS, limit=4, rng=random.Random(7))
    assert len(picks) == 4
    assert all(p.rating >= 4.5 for p in picks)
    assert len(set(ids(picks))) == 4


def test_featured_limit_larger_than_pool():
    pool = [make_product("a", rating=4.9), make_product("b", rating=3.0)]
    assert ids(featured(pool, limit=6)) == ["a"]


def test_load_seeds_empty_storage():
    storage = MemoryStore()
    catalog = Catalog()
    catalog.load(storage)
    assert len(catalog.products) == 24
    assert len(storage.load(CATALOG_KEY)) == 24
    assert catalog.error_message is None


def test_load_reads_existing_storage():
    storage = MemoryStore()
    storage.save(CATALOG_KEY, [make_product("z1").model_dump(mode="json")])
    catalog = Catalog()
    catalog.load(storage)
    assert ids(catalog.products) == ["z1"]
    assert catalog.get("z1").name == "Item z1"
    assert catalog.get("p001") is None


def test_load_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"products": [make_product("f1").model_dump(mode="json")]}))
    catalog = Catalog()
    catalog.load(MemoryStore(), str(path))
    assert ids(catalog.products) == ["f1"]


def test_unreadable_file_falls_back_to_sample(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    catalog = Catalog()
    catalog.load(MemoryStore(), str(path))
    assert len(catalog.products) == 24
    assert catalog.error_message


def test_invalid_product_falls_back_to_sample():
    storage = MemoryStore()
    storage.save(CATALOG_KEY, [{"id": "bad", "price": "-1"}])
    catalog = Catalog()
    catalog.load(storage)
    assert len(catalog.products) == 24
    assert catalog.error_message


class BrokenStore(MemoryStore):
    def load(self, key):
        raise StorageError("backend unavailable")


def test_storage_failure_falls_back_to_sample():
    catalog = Catalog()
    catalog.load(BrokenStore())
    assert catalog.get("p006").name == "Amul Milk"
    assert catalog.error_message
