# app/config/settings.py
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List, Optional
import os

DEFAULT_SECRET_KEY = "change-in-production"

class Settings(BaseSettings):
    # App Info
    app_name: str = "DakBox API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./dakbox.db")

    # Security
    secret_key: str = Field(
        DEFAULT_SECRET_KEY,
        validation_alias=AliasChoices("ACCESS_TOKEN_SECRET", "SECRET_KEY")
    )
    algorithm: str = "HS256"
    access_token_expire_days: int = 90

    # Payment gateway (Stripe)
    payment_gateway_key: Optional[str] = os.getenv("PAYMENT_GATEWAY_KEY")
    payment_gateway_url: str = "https://api.stripe.com/v1"
    payment_currency: str = "bdt"
    payment_gateway_timeout: int = 30

    # Business rules
    min_cashout_amount: int = 500

    # CORS
    cors_origins: List[str] = ["*"]

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 5000))

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

settings = Settings()
