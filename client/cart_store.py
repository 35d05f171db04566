# client/cart_store.py
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from client.api import ApiClient, ApiError
from core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CartState:
    items: List[dict] = field(default_factory=list)
    total_items: int = 0
    total_price: float = 0
    loading: bool = False


@dataclass
class ActionResult:
    success: bool
    message: Optional[str] = None


class CartStore:
    """
    Local mirror of the signed-in user's cart.

    Each call sets `loading`, issues one request and, on success, replaces
    the whole state with the server's cart. On failure the previous items
    stay as they were and only `loading` is cleared.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.state = CartState()

    def _set_cart(self, payload: dict) -> None:
        self.state = CartState(
            items=payload.get("cart") or [],
            total_items=payload.get("totalItems") or 0,
            total_price=payload.get("totalPrice") or 0,
            loading=False,
        )

    def _mutate(self, method: str, path: str, body: Optional[dict], default_message: str) -> ActionResult:
        self.state.loading = True
        try:
            payload = self.api.request(method, path, json=body)
        except ApiError as e:
            self.state.loading = False
            return ActionResult(success=False, message=e.message or default_message)
        except requests.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            self.state.loading = False
            return ActionResult(success=False, message=default_message)
        self._set_cart(payload)
        return ActionResult(success=True)

    def load_cart(self) -> None:
        self.state.loading = True
        try:
            self._set_cart(self.api.get("/cart"))
        except (ApiError, requests.RequestException) as e:
            logger.warning(f"Error loading cart: {e}")
            self.state.loading = False

    def add_to_cart(self, product_id: str, quantity: int = 1) -> ActionResult:
        return self._mutate(
            "POST", "/cart/add", {"productId": product_id, "quantity": quantity}, "Failed to add to cart"
        )

    def update_cart_item(self, product_id: str, quantity: int) -> ActionResult:
        return self._mutate(
            "PUT", "/cart/update", {"productId": product_id, "quantity": quantity}, "Failed to update cart"
        )

    def remove_from_cart(self, product_id: str) -> ActionResult:
        return self._mutate("DELETE", "/cart/remove", {"productId": product_id}, "Failed to remove from cart")

    def clear_cart(self) -> ActionResult:
        return self._mutate("DELETE", "/cart/clear", None, "Failed to clear cart")

    def reset(self) -> None:
        """Sign-out: forget the cart without calling the server."""
        self.state = CartState()
