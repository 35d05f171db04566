from fastapi import APIRouter, Depends, HTTPException, Response

from core.config import ACCESS_TOKEN_EXPIRE_MINUTES
from core.security import verify_password, create_access_token
from db import Database, get_database
from repositories.users import UserRepository
from routers.users import to_user_out
from schemas.auth import LoginRequest, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(response: Response, credentials: LoginRequest, database: Database = Depends(get_database)):
    user = await UserRepository(database).get_by_email(credentials.email.lower())
    if not user or not verify_password(credentials.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": user["_id"]})

    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )

    return {"message": "Login successful", "token": token, "user": to_user_out(user)}
