import os
import sys
import threading
from datetime import datetime, timezone
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')
os.environ.setdefault('CELERY_TASK_ALWAYS_EAGER', '1')

from app.config import TestingConfig  # noqa: E402
from app.services.scheduler import ManualScheduler  # noqa: E402
from app.services.storage import MemoryStore  # noqa: E402
from app.services.storefront import Storefront  # noqa: E402
from models.product import Product  # noqa: E402
from models.user import Address  # noqa: E402

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def make_product(pid="x1", price="100", **extra):
    fields = dict(id=pid, name=f"Item {pid}", price=Decimal(price), category="Pantry Staples", unit="1 kg")
    fields.update(extra)
    return Product(**fields)


def make_address(**extra):
    fields = dict(street="12 Market Road", city="Pune", state="MH", zip_code="411001")
    fields.update(extra)
    return Address(**fields)


@pytest.fixture()
def scheduler():
    return ManualScheduler(start=T0)


@pytest.fixture()
def storage():
    return MemoryStore()


@pytest.fixture()
def storefront(storage, scheduler):
    sf = Storefront(storage, scheduler)
    sf.start()
    yield sf
    sf.shutdown()


@pytest.fixture()
def app_instance():
    from app import create_app
    return create_app(TestingConfig)


@pytest.fixture()
def app(app_instance):
    yield app_instance
    app_instance.extensions["storefront"].shutdown()


@pytest.fixture()
def client(app):
    return app.test_client()


def auth_header(client, user_id):
    resp = client.post("/api/v1/auth/login", json={"user_id": user_id})
    return {"Authorization": f"Bearer {resp.get_json()['access_token']}"}


ADDRESS_BODY = {
    "street": "12 Market Road",
    "city": "Pune",
    "state": "MH",
    "zip_code": "411001",
}


def lock_is_free(lock):
    """Try the lock from another thread."""
    acquired = []

    def attempt():
        got = lock.acquire(blocking=False)
        if got:
            lock.release()
        acquired.append(got)

    other = threading.Thread(target=attempt)
    other.start()
    other.join()
    return acquired[0]
