from pydantic import BaseModel, Field, field_validator

from app.shared.schemas.common import normalize_email

class TokenRequest(BaseModel):
    """Schema for exchanging a signed-in email for a service token"""
    email: str = Field(..., description="Email of the signed-in user")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {
                "email": "user@dakbox.com"
            }
        }

class TokenResponse(BaseModel):
    token: str

    class Config:
        json_schema_extra = {
            "example": {
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
            }
        }
