# schemas/cart.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CartBody(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    product_id: str = Field(..., min_length=1)


class CartAdd(CartBody):
    quantity: int = 1


class CartUpdate(CartBody):
    # sign is checked by the service so a negative value reads as a bad request
    quantity: int


class CartRemove(CartBody):
    pass


class CartProduct(BaseModel):
    id: str
    name: str
    price: float
    image: Optional[str] = ""
    category: str
    stock: int


class CartItemOut(BaseModel):
    product: CartProduct
    quantity: int


class CartOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: Optional[str] = None
    cart: List[CartItemOut]
    total_items: int
    total_price: float
