# routers/cart.py
from fastapi import APIRouter, Depends

from core.dependencies import get_cart_service, get_current_user
from schemas.cart import CartAdd, CartOut, CartRemove, CartUpdate
from services.cart import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


# GET /cart - current cart with resolved products and totals
@router.get("", response_model=CartOut, response_model_exclude_none=True)
async def get_cart(
    current_user: dict = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return await svc.view(current_user["_id"])


# POST /cart/add - add a product, summing with any quantity already in the cart
@router.post("/add", response_model=CartOut)
async def add_to_cart(
    item: CartAdd,
    current_user: dict = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    view = await svc.add(current_user["_id"], item.product_id, item.quantity)
    return {"message": "Item added to cart successfully", **view}


# PUT /cart/update - set a quantity exactly, 0 removes the item
@router.put("/update", response_model=CartOut)
async def update_cart(
    data: CartUpdate,
    current_user: dict = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    view = await svc.update_quantity(current_user["_id"], data.product_id, data.quantity)
    return {"message": "Cart updated successfully", **view}


# DELETE /cart/remove - remove one product
@router.delete("/remove", response_model=CartOut)
async def remove_from_cart(
    data: CartRemove,
    current_user: dict = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    view = await svc.remove(current_user["_id"], data.product_id)
    return {"message": "Item removed from cart successfully", **view}


# DELETE /cart/clear - empty the cart
@router.delete("/clear", response_model=CartOut)
async def clear_cart(
    current_user: dict = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    view = await svc.clear(current_user["_id"])
    return {"message": "Cart cleared successfully", **view}
