# repositories/carts.py
from datetime import datetime, timezone
from typing import List

from pymongo.errors import DuplicateKeyError

from core.errors import CartConflict
from db import Database


class CartRepository:
    """
    One document per user: {_id: user_id, items: [{product_id, quantity}], version}.

    `version` is the optimistic-concurrency token. A user without a cart
    document reads as an empty cart at version 0.
    """

    def __init__(self, database: Database):
        self.collection = database.carts

    async def load(self, user_id: str) -> dict:
        doc = await self.collection.find_one({"_id": user_id})
        if not doc:
            return {"_id": user_id, "items": [], "version": 0}
        doc.setdefault("items", [])
        doc.setdefault("version", 0)
        return doc

    async def save(self, user_id: str, items: List[dict], expected_version: int) -> int:
        """Write `items` only if the stored version still equals `expected_version`."""
        now = datetime.now(timezone.utc)

        if expected_version == 0:
            # carts written before versioning have no version field
            result = await self.collection.update_one(
                {"_id": user_id, "version": {"$exists": False}},
                {"$set": {"items": items, "version": 1, "updated_at": now}},
            )
            if result.matched_count:
                return 1
            try:
                await self.collection.insert_one(
                    {"_id": user_id, "items": items, "version": 1, "updated_at": now}
                )
            except DuplicateKeyError:
                raise CartConflict()
            return 1

        result = await self.collection.update_one(
            {"_id": user_id, "version": expected_version},
            {"$set": {"items": items, "updated_at": now}, "$inc": {"version": 1}},
        )
        if result.matched_count == 0:
            raise CartConflict()
        return expected_version + 1

    async def clear(self, user_id: str) -> None:
        await self.collection.update_one(
            {"_id": user_id},
            {
                "$set": {"items": [], "updated_at": datetime.now(timezone.utc)},
                "$inc": {"version": 1},
            },
            upsert=True,
        )
