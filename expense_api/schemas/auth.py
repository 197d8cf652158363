from pydantic import EmailStr, Field

from expense_api.schemas.base import ApiModel
from expense_api.schemas.user import UserResponse


class RegisterRequest(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=8)


class LoginRequest(ApiModel):
    email: EmailStr
    password: str


class TokenResponse(ApiModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
