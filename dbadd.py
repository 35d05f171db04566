# dbadd.py: seed the product catalog and optionally promote an admin
import argparse
import asyncio
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pymongo import UpdateOne

from core.logger import get_logger
from db import Database
from repositories.users import UserRepository
from schemas.product import ProductCreate

logger = get_logger("dbadd")

SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {"name": "iPhone 15 Pro", "description": "Latest iPhone with titanium design and A17 Pro chip",
     "price": 999, "category": "Electronics", "stock": 50, "rating": 4.8,
     "image": "https://images.unsplash.com/photo-1592750475338-74b7b21085ab?w=300"},
    {"name": "Samsung Galaxy S24", "description": "Premium Android smartphone with AI features",
     "price": 899, "category": "Electronics", "stock": 30, "rating": 4.7,
     "image": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=300"},
    {"name": "MacBook Pro M3", "description": "Powerful laptop for professionals and creators",
     "price": 1999, "category": "Electronics", "stock": 25, "rating": 4.9,
     "image": "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?w=300"},
    {"name": "Nike Air Max 270", "description": "Comfortable running shoes with Max Air cushioning",
     "price": 150, "category": "Clothing", "stock": 100, "rating": 4.5,
     "image": "https://images.unsplash.com/photo-1542291026-7eec264c27ff?w=300"},
    {"name": "Adidas Ultraboost 22", "description": "High-performance running shoes with Boost technology",
     "price": 180, "category": "Clothing", "stock": 75, "rating": 4.6,
     "image": "https://images.unsplash.com/photo-1606107557195-0e29a4b5b4aa?w=300"},
    {"name": "The Great Gatsby", "description": "Classic American novel by F. Scott Fitzgerald",
     "price": 12, "category": "Books", "stock": 200, "rating": 4.4,
     "image": "https://images.unsplash.com/photo-1544947950-fa07a98d237f?w=300"},
    {"name": "To Kill a Mockingbird", "description": "Harper Lee's masterpiece about justice and morality",
     "price": 14, "category": "Books", "stock": 150, "rating": 4.7,
     "image": "https://images.unsplash.com/photo-1481627834876-b7833e8f5570?w=300"},
    {"name": "Smart Coffee Maker", "description": "WiFi-enabled coffee maker with app control",
     "price": 299, "category": "Home", "stock": 40, "rating": 4.3,
     "image": "https://images.unsplash.com/photo-1495474472287-4d71bcdd2085?w=300"},
    {"name": "Air Purifier", "description": "HEPA filter air purifier for clean indoor air",
     "price": 199, "category": "Home", "stock": 60, "rating": 4.2,
     "image": "https://images.unsplash.com/photo-1581578731548-c6a0c3f2f6c5?w=300"},
    {"name": "Yoga Mat Premium", "description": "Non-slip yoga mat with carrying strap",
     "price": 45, "category": "Sports", "stock": 80, "rating": 4.4,
     "image": "https://images.unsplash.com/photo-1544367567-0f2fcb009e0b?w=300"},
    {"name": "Wireless Headphones", "description": "Noise-cancelling wireless headphones with 30hr battery",
     "price": 199, "category": "Electronics", "stock": 45, "rating": 4.5,
     "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=300"},
    {"name": "Skincare Set", "description": "Complete skincare routine with cleanser, toner, and moisturizer",
     "price": 89, "category": "Beauty", "stock": 35, "rating": 4.3,
     "image": "https://images.unsplash.com/photo-1570194065650-d99fb4bedf0a?w=300"},
]


def to_uuid5_key(doc: Dict[str, Any]) -> str:
    """
    Deterministic _id so importing the same file twice does not duplicate.
    Keyed on name|category.
    """
    base = f"{doc.get('name', '').strip().lower()}|{str(doc.get('category', '')).strip().lower()}"
    return str(uuid.uuid5(uuid.NAMESPACE_URL, base))


def normalize_doc(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Validate one product with the API schema and add server-managed fields."""
    doc = ProductCreate(**raw).model_dump(mode="json")
    doc["_id"] = to_uuid5_key(doc)
    now = datetime.now(timezone.utc)
    doc["created_at"] = now
    doc["updated_at"] = now
    return doc


def load_items(json_path: Optional[Path]) -> List[Dict[str, Any]]:
    if json_path is None:
        return SAMPLE_PRODUCTS
    if not json_path.exists():
        raise FileNotFoundError(f"File not found: {json_path}")

    # either a list of products or {"items": [...]}
    with json_path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    if isinstance(data, list):
        return data
    raise ValueError("Invalid JSON: expected a list of products or an object with an 'items' list.")


async def bulk_import(database: Database, items: List[Dict[str, Any]]) -> Dict[str, int]:
    docs = [normalize_doc(x) for x in items]
    # created_at is only written on first insert so re-seeding keeps listing order
    ops = [
        UpdateOne(
            {"_id": d["_id"]},
            {
                "$set": {k: v for k, v in d.items() if k not in ("_id", "created_at")},
                "$setOnInsert": {"created_at": d["created_at"]},
            },
            upsert=True,
        )
        for d in docs
    ]
    result = await database.products.bulk_write(ops, ordered=False)
    counts = {
        "upserted": result.upserted_count,
        "modified": result.modified_count,
        "matched": result.matched_count,
    }
    logger.info(f"Seed done: {counts}")
    return counts


async def main(json_path: Optional[Path], admin_email: Optional[str]) -> None:
    database = Database()
    database.connect()
    try:
        await database.ensure_indexes()
        await bulk_import(database, load_items(json_path))
        if admin_email:
            if await UserRepository(database).set_role(admin_email.lower(), "admin"):
                logger.info(f"{admin_email} is now an admin")
            else:
                logger.warning(f"No user registered with {admin_email}")
    finally:
        database.close()


if __name__ == "__main__":
    # Usage:
    #   python dbadd.py                          -> built-in sample catalog
    #   python dbadd.py data.json                -> products from a JSON file
    #   python dbadd.py --admin owner@shop.io    -> also promote a registered user
    parser = argparse.ArgumentParser(description="Seed the storefront product catalog.")
    parser.add_argument("path", nargs="?", type=Path, help="JSON file with products")
    parser.add_argument("--admin", dest="admin_email", help="email of a registered user to make admin")
    args = parser.parse_args()
    asyncio.run(main(args.path, args.admin_email))
