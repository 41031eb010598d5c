from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=1, max_length=128)


class AuthResponse:
    def __init__(
        self,
        success: bool,
        admin: Optional[dict] = None,
        token: Optional[str] = None,
        error: Optional[str] = None,
    ):
        self.success = success
        self.admin = admin
        self.token = token
        self.error = error
