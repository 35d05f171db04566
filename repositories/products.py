# repositories/products.py
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pymongo import ReturnDocument

from db import Database


class ProductRepository:
    def __init__(self, database: Database):
        self.collection = database.products

    async def find_page(
        self,
        query: Dict[str, Any],
        sort: List[Tuple[str, int]],
        skip: int,
        limit: int,
    ) -> List[dict]:
        cursor = self.collection.find(query).sort(sort).skip(skip).limit(limit)
        return await cursor.to_list(length=limit)

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.collection.count_documents(query)

    async def get(self, product_id: str) -> Optional[dict]:
        return await self.collection.find_one({"_id": product_id})

    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, dict]:
        ids = list(product_ids)
        if not ids:
            return {}
        docs = await self.collection.find({"_id": {"$in": ids}}).to_list(length=len(ids))
        return {doc["_id"]: doc for doc in docs}

    async def insert(self, doc: dict) -> dict:
        await self.collection.insert_one(doc)
        return doc

    async def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        return await self.collection.find_one_and_update(
            {"_id": product_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, product_id: str) -> bool:
        result = await self.collection.delete_one({"_id": product_id})
        return result.deleted_count > 0

    async def distinct_categories(self) -> List[str]:
        return sorted(await self.collection.distinct("category"))
