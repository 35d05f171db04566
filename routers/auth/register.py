from datetime import datetime, timezone
import uuid

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

from core.logger import get_logger
from core.security import get_password_hash, create_access_token
from db import Database, get_database
from repositories.users import UserRepository
from routers.users import to_user_out
from schemas.auth import TokenResponse
from schemas.user import UserCreate

logger = get_logger(__name__)

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(user: UserCreate, database: Database = Depends(get_database)):
    users = UserRepository(database)
    email = user.email.lower()
    if await users.get_by_email(email):
        raise HTTPException(status_code=400, detail="User already exists")

    new_user = {
        "_id": str(uuid.uuid4()),
        "email": email,
        "name": user.name,
        "password": get_password_hash(user.password),
        "role": "user",
        "created_at": datetime.now(timezone.utc),
    }
    try:
        await users.insert(new_user)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists")

    logger.info(f"Registered user {new_user['_id']}")
    token = create_access_token(data={"sub": new_user["_id"]})
    return {"message": "User registered successfully", "token": token, "user": to_user_out(new_user)}
