# repositories/users.py
from typing import Optional

from db import Database


class UserRepository:
    def __init__(self, database: Database):
        self.collection = database.users

    async def get(self, user_id: str) -> Optional[dict]:
        return await self.collection.find_one({"_id": user_id})

    async def get_by_email(self, email: str) -> Optional[dict]:
        return await self.collection.find_one({"email": email})

    async def insert(self, doc: dict) -> dict:
        await self.collection.insert_one(doc)
        return doc

    async def set_role(self, email: str, role: str) -> bool:
        result = await self.collection.update_one({"email": email}, {"$set": {"role": role}})
        return result.matched_count > 0
