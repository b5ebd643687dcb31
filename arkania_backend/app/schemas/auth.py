"""
Schemas de Autenticación
Conjunto Residencial Arkania
"""
from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request para login"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "admin@arkania.com",
                "password": "Arkania2024"
            }
        }


class RefreshTokenRequest(BaseModel):
    """Request para refresh token"""
    refresh_token: str


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
