# services/catalog.py
import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

from core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from core.errors import BadRequest, NotFound, storage_boundary
from core.logger import get_logger
from repositories.products import ProductRepository
from schemas.product import ProductCreate, ProductUpdate

logger = get_logger(__name__)

ALL_CATEGORIES = "all"

# largest skip the driver can encode (signed 64-bit)
MAX_SKIP = 2**63 - 1

# wire name -> stored field
SORT_FIELDS = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "price": "price",
    "name": "name",
    "rating": "rating",
    "stock": "stock",
}


def to_out(doc: dict) -> dict:
    return {"id": str(doc["_id"]), **{k: v for k, v in doc.items() if k != "_id"}}


def build_filter(
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
) -> Dict[str, Any]:
    match: Dict[str, Any] = {}

    if category and category != ALL_CATEGORIES:
        match["category"] = category

    if min_price is not None or max_price is not None:
        price_cond = {}
        if min_price is not None:
            price_cond["$gte"] = min_price
        if max_price is not None:
            price_cond["$lte"] = max_price
        match["price"] = price_cond

    if search:
        pattern = re.escape(search.strip())
        match["$or"] = [
            {"name": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]

    return match


def build_sort(sort_by: Optional[str], sort_dir: Literal["asc", "desc"]) -> List[Tuple[str, int]]:
    dir_num = 1 if sort_dir == "asc" else -1
    field = SORT_FIELDS.get(sort_by or "", "created_at")
    return [(field, dir_num), ("_id", dir_num)]


def paginate(page: int, limit: int, total: int, returned: int) -> Dict[str, Any]:
    skip = (page - 1) * limit
    return {
        "current_page": page,
        "total_pages": math.ceil(total / limit),
        "total_products": total,
        "has_next": skip + returned < total,
        "has_prev": page > 1,
    }


class CatalogService:
    """
    Product catalog use cases.

    Queries (list, get, categories) are public; create/update/delete are
    administrative and the router guards them with the admin check.
    """

    def __init__(self, products: ProductRepository):
        self.repo = products

    @storage_boundary
    async def list_products(
        self,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = "createdAt",
        sort_dir: Literal["asc", "desc"] = "desc",
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        if page < 1:
            raise BadRequest("Page must be 1 or greater")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise BadRequest(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        skip = (page - 1) * limit
        if skip > MAX_SKIP:
            raise BadRequest("Page is out of range")

        query = build_filter(category, min_price, max_price, search)

        docs = await self.repo.find_page(query, build_sort(sort_by, sort_dir), skip, limit)
        total = await self.repo.count(query)

        return {
            "products": [to_out(d) for d in docs],
            "pagination": paginate(page, limit, total, len(docs)),
        }

    @storage_boundary
    async def get_product(self, product_id: str) -> dict:
        doc = await self.repo.get(product_id)
        if not doc:
            raise NotFound("Product not found")
        return to_out(doc)

    @storage_boundary
    async def list_categories(self) -> List[str]:
        return await self.repo.distinct_categories()

    @storage_boundary
    async def create_product(self, payload: ProductCreate, created_by: Optional[str] = None) -> dict:
        now = datetime.now(timezone.utc)
        doc = {
            "_id": str(uuid.uuid4()),
            **payload.model_dump(mode="json"),
            "created_at": now,
            "updated_at": now,
        }
        await self.repo.insert(doc)
        logger.info(f"Product {doc['_id']} created by {created_by}")
        return to_out(doc)

    @storage_boundary
    async def update_product(
        self, product_id: str, patch: ProductUpdate, updated_by: Optional[str] = None
    ) -> dict:
        update_data = patch.model_dump(mode="json", exclude_none=True)
        if not update_data:
            return await self.get_product(product_id)

        update_data["updated_at"] = datetime.now(timezone.utc)
        doc = await self.repo.update(product_id, update_data)
        if not doc:
            raise NotFound("Product not found")
        logger.info(f"Product {product_id} updated by {updated_by}: {sorted(update_data)}")
        return to_out(doc)

    @storage_boundary
    async def delete_product(self, product_id: str, deleted_by: Optional[str] = None) -> None:
        if not await self.repo.delete(product_id):
            raise NotFound("Product not found")
        logger.info(f"Product {product_id} deleted by {deleted_by}")
