import pytest
from catalogue import get_catalog
from notifications.channel import get_notifier
from ordering.cart.cart import ProductSnapshot, VehicleSnapshot
from ordering.cart.store import CartStore, MemoryKeyValueStore
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def catalog():
    """The fake catalogue installed behind ``get_catalog()``."""
    return get_catalog()


@pytest.fixture()
def notifier():
    """The fake notifier installed behind ``get_notifier()``."""
    return get_notifier()


@pytest.fixture()
def kv():
    return MemoryKeyValueStore()


@pytest.fixture()
def store(kv):
    return CartStore(kv, session_id="sess-001")


@pytest.fixture()
def make_product():
    return _make_product


@pytest.fixture()
def make_vehicle():
    return _make_vehicle


def _make_product(product_id="prod-A", price=100.0, discount=None, stock=5, active=True, name=None, tax_rate=19.0):
    return ProductSnapshot(
        product_id=product_id,
        name=name or f"Product {product_id}",
        price=price,
        discount_percentage=discount,
        stock_quantity=stock,
        is_active=active,
        tax_rate=tax_rate,
    )


def _make_vehicle(vehicle_id="veh-V", price=25000.0, discount=None, sold=False, name=None):
    return VehicleSnapshot(
        vehicle_id=vehicle_id,
        name=name or f"Vehicle {vehicle_id}",
        price=price,
        discount_percentage=discount,
        is_sold=sold,
        tax_rate=19.0,
    )
