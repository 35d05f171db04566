# routers/products.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from core.config import DEFAULT_PAGE_SIZE
from core.dependencies import get_catalog_service, require_admin
from schemas.product import CategoryList, ProductCreate, ProductEnvelope, ProductPage, ProductUpdate
from services.catalog import CatalogService

router = APIRouter(prefix="/products", tags=["Products"])


# GET /products - filtered, sorted and paginated listing
@router.get("", response_model=ProductPage)
async def get_products(
    category: Optional[str] = Query(None, description="Exact category, 'all' disables the filter"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or description"),
    sort: str = "createdAt",
    order: Literal["asc", "desc"] = "desc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    svc: CatalogService = Depends(get_catalog_service),
):
    return await svc.list_products(
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort_by=sort,
        sort_dir=order,
        page=page,
        limit=limit,
    )


# GET /products/categories - distinct categories in use
@router.get("/categories", response_model=CategoryList)
async def get_categories(svc: CatalogService = Depends(get_catalog_service)):
    return {"categories": await svc.list_categories()}


# GET /products/{id} - single product
@router.get("/{product_id}", response_model=ProductEnvelope, response_model_exclude_none=True)
async def get_product(product_id: str, svc: CatalogService = Depends(get_catalog_service)):
    return {"product": await svc.get_product(product_id)}


# POST /products - create a product (admin)
@router.post("", response_model=ProductEnvelope, status_code=201)
async def create_product(
    product: ProductCreate,
    user: dict = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    created = await svc.create_product(product, created_by=user["_id"])
    return {"message": "Product created successfully", "product": created}


# PUT /products/{id} - partial update (admin)
@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    update: ProductUpdate,
    user: dict = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    updated = await svc.update_product(product_id, update, updated_by=user["_id"])
    return {"message": "Product updated successfully", "product": updated}


# DELETE /products/{id} - delete a product (admin)
@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    user: dict = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    await svc.delete_product(product_id, deleted_by=user["_id"])
    return {"message": "Product deleted successfully"}
