from fastapi import APIRouter, Depends

from core.dependencies import get_current_user
from schemas.user import UserOut

router = APIRouter(prefix="", tags=["Users"])


def to_user_out(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "email": user["email"],
        "name": user.get("name", ""),
        "role": user.get("role", "user"),
        "created_at": user.get("created_at"),
    }


# GET /me - current user profile
@router.get("/me", response_model=UserOut)
async def get_profile(current_user: dict = Depends(get_current_user)):
    return to_user_out(current_user)
