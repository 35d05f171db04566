# schemas/product.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    electronics = "Electronics"
    clothing = "Clothing"
    books = "Books"
    home = "Home"
    sports = "Sports"
    beauty = "Beauty"
    toys = "Toys"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseProduct(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[float] = Field(None, ge=0, strict=True)
    category: Optional[Category] = None
    image: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0, strict=True)
    rating: Optional[float] = Field(None, ge=0, le=5, strict=True)


class ProductCreate(BaseProduct):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10)
    price: float = Field(..., ge=0, strict=True)
    category: Category
    image: str = ""
    stock: int = Field(..., ge=0, strict=True)
    rating: float = Field(0, ge=0, le=5, strict=True)


class ProductUpdate(BaseProduct):
    pass


class ProductOut(CamelModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    image: Optional[str] = ""
    stock: int
    rating: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_products: int
    has_next: bool
    has_prev: bool


class ProductPage(CamelModel):
    products: List[ProductOut]
    pagination: Pagination


class ProductEnvelope(CamelModel):
    message: Optional[str] = None
    product: ProductOut


class CategoryList(CamelModel):
    categories: List[str]
