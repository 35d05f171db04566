# core/dependencies.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError

from core.config import SECRET_KEY, ALGORITHM
from core.errors import Forbidden
from db import Database, get_database
from repositories.carts import CartRepository
from repositories.products import ProductRepository
from repositories.users import UserRepository
from services.cart import CartService
from services.catalog import CatalogService


def _extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the access_token cookie set at login."""
    auth_header = request.headers.get("Authorization")
    if auth_header:
        parts = auth_header.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return request.cookies.get("access_token")


async def get_current_user(request: Request, database: Database = Depends(get_database)) -> dict:
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
        )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=401, detail="Token is not valid")
    except JWTError:
        raise HTTPException(status_code=401, detail="Token is not valid")

    user = await UserRepository(database).get(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if user.get("role") != "admin":
        raise Forbidden("Admin access required")
    return user


def get_catalog_service(database: Database = Depends(get_database)) -> CatalogService:
    return CatalogService(ProductRepository(database))


def get_cart_service(database: Database = Depends(get_database)) -> CartService:
    return CartService(CartRepository(database), ProductRepository(database))
