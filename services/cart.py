# services/cart.py
from decimal import Decimal
from typing import Any, Dict, List

from core.errors import BadRequest, InsufficientStock, NotFound, storage_boundary
from core.logger import get_logger
from repositories.carts import CartRepository
from repositories.products import ProductRepository

logger = get_logger(__name__)

DISPLAY_FIELDS = ("name", "price", "image", "category", "stock")


def find_cart_item_index(items: List[dict], product_id: str) -> int:
    for i, item in enumerate(items):
        if item.get("product_id") == product_id:
            return i
    return -1


class CartService:
    """
    Per-user cart use cases.

    Every mutation reads the cart document, applies the change to a copy of
    its items and writes it back guarded by the cart version, so a
    concurrent change makes the write fail with CartConflict instead of
    being overwritten. Stock is checked against the product at call time
    only; nothing is reserved.
    """

    def __init__(self, carts: CartRepository, products: ProductRepository):
        self.carts = carts
        self.products = products

    async def _render(self, items: List[dict]) -> Dict[str, Any]:
        """Resolve product fields and compute the totals from current prices."""
        catalog = await self.products.get_many(i["product_id"] for i in items)

        lines = []
        total_items = 0
        total_price = Decimal("0")

        for item in items:
            product = catalog.get(item["product_id"])
            if not product:
                # product deleted after it was added
                continue
            quantity = int(item["quantity"])
            lines.append(
                {
                    "product": {"id": product["_id"], **{f: product.get(f) for f in DISPLAY_FIELDS}},
                    "quantity": quantity,
                }
            )
            total_items += quantity
            total_price += Decimal(str(product["price"])) * quantity

        return {
            "cart": lines,
            "total_items": total_items,
            "total_price": float(total_price),
        }

    async def _get_product(self, product_id: str) -> dict:
        product = await self.products.get(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    # query
    @storage_boundary
    async def view(self, user_id: str) -> Dict[str, Any]:
        cart = await self.carts.load(user_id)
        return await self._render(cart["items"])

    # commands
    @storage_boundary
    async def add(self, user_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        if quantity < 1:
            raise BadRequest("Quantity must be at least 1")

        product = await self._get_product(product_id)
        if product.get("stock", 0) < quantity:
            raise InsufficientStock("Insufficient stock")

        cart = await self.carts.load(user_id)
        items = [dict(i) for i in cart["items"]]

        idx = find_cart_item_index(items, product_id)
        if idx >= 0:
            new_quantity = items[idx]["quantity"] + quantity
            if new_quantity > product.get("stock", 0):
                logger.warning(
                    f"User {user_id} asked for {new_quantity} of product {product_id}, "
                    f"only {product.get('stock', 0)} in stock"
                )
                raise InsufficientStock("Insufficient stock for requested quantity")
            items[idx]["quantity"] = new_quantity
        else:
            items.append({"product_id": product_id, "quantity": quantity})

        await self.carts.save(user_id, items, cart["version"])
        logger.info(f"User {user_id} added {quantity} x product {product_id} to cart")
        return await self._render(items)

    @storage_boundary
    async def update_quantity(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        if quantity < 0:
            raise BadRequest("Quantity cannot be negative")

        product = await self._get_product(product_id)
        if quantity > product.get("stock", 0):
            raise InsufficientStock("Insufficient stock")

        cart = await self.carts.load(user_id)
        items = [dict(i) for i in cart["items"]]

        idx = find_cart_item_index(items, product_id)
        if idx == -1:
            raise NotFound("Item not found in cart")

        if quantity == 0:
            items.pop(idx)
        else:
            items[idx]["quantity"] = quantity

        await self.carts.save(user_id, items, cart["version"])
        logger.info(f"User {user_id} set product {product_id} quantity to {quantity}")
        return await self._render(items)

    @storage_boundary
    async def remove(self, user_id: str, product_id: str) -> Dict[str, Any]:
        cart = await self.carts.load(user_id)
        items = [dict(i) for i in cart["items"]]

        idx = find_cart_item_index(items, product_id)
        if idx == -1:
            raise NotFound("Item not found in cart")
        items.pop(idx)

        await self.carts.save(user_id, items, cart["version"])
        logger.info(f"User {user_id} removed product {product_id} from cart")
        return await self._render(items)

    @storage_boundary
    async def clear(self, user_id: str) -> Dict[str, Any]:
        await self.carts.clear(user_id)
        logger.info(f"User {user_id} cleared cart")
        return {"cart": [], "total_items": 0, "total_price": 0.0}
