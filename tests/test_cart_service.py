import pytest
from pymongo.errors import ServerSelectionTimeoutError

from core.errors import CartConflict, InternalError, NotFound
from repositories.carts import CartRepository
from repositories.products import ProductRepository
from services.cart import CartService

pytestmark = pytest.mark.anyio


@pytest.fixture
async def service(database):
    await database.products.insert_one(
        {"_id": "p1", "name": "Lamp", "description": "Reading lamp", "price": 20.0,
         "category": "Home", "image": "", "stock": 5, "rating": 4.0}
    )
    return CartService(CartRepository(database), ProductRepository(database))


async def test_missing_cart_reads_as_empty(database):
    cart = await CartRepository(database).load("nobody")

    assert cart == {"_id": "nobody", "items": [], "version": 0}


async def test_each_write_bumps_version(service, database):
    await service.add("u1", "p1", 1)
    await service.add("u1", "p1", 1)

    stored = await database.carts.find_one({"_id": "u1"})
    assert stored["version"] == 2
    assert stored["items"] == [{"product_id": "p1", "quantity": 2}]


async def test_stale_write_is_rejected(service, database):
    await service.add("u1", "p1", 1)
    repo = CartRepository(database)
    stale = await repo.load("u1")

    # another request wins the race
    await service.update_quantity("u1", "p1", 3)

    with pytest.raises(CartConflict):
        await repo.save("u1", [], stale["version"])

    stored = await database.carts.find_one({"_id": "u1"})
    assert stored["items"] == [{"product_id": "p1", "quantity": 3}]


async def test_clear_ignores_version(service, database):
    await service.add("u1", "p1", 2)

    view = await service.clear("u1")

    assert view == {"cart": [], "total_items": 0, "total_price": 0.0}
    stored = await database.carts.find_one({"_id": "u1"})
    assert stored["items"] == []
    assert stored["version"] == 2


async def test_clear_without_cart_succeeds(service):
    assert (await service.clear("u2"))["total_items"] == 0


async def test_remove_missing_item_raises_not_found(service):
    with pytest.raises(NotFound):
        await service.remove("u1", "p1")


class _BrokenCarts:
    async def load(self, user_id):
        raise ServerSelectionTimeoutError("no servers available")


async def test_storage_failure_becomes_internal_error(database):
    svc = CartService(_BrokenCarts(), ProductRepository(database))

    with pytest.raises(InternalError):
        await svc.view("u1")


async def test_cart_without_version_field_is_writable(service, database):
    await database.carts.insert_one({"_id": "u3", "items": []})

    view = await service.add("u3", "p1", 2)

    assert view["total_items"] == 2
    stored = await database.carts.find_one({"_id": "u3"})
    assert stored["version"] == 1
    assert stored["items"] == [{"product_id": "p1", "quantity": 2}]
