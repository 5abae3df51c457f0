from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """POST /auth/login"""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
