# schemas/auth.py
from pydantic import BaseModel, EmailStr

from schemas.user import UserOut


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    message: str
    token: str
    user: UserOut
