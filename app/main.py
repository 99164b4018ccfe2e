# app/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config.settings import settings, DEFAULT_SECRET_KEY
from app.config.database import init_db
from app.core.middleware import setup_middleware, setup_exception_handlers
from app.api.v1.router import api_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 DakBox API starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"⏰ Token expire: {settings.access_token_expire_days} days")
    logger.info(f"🗄️  Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("🔑 ACCESS_TOKEN_SECRET is not set; tokens are signed with the default key")
    if not settings.payment_gateway_key:
        logger.warning("💳 PAYMENT_GATEWAY_KEY is not set; payment intents will be refused")

    init_db()

    yield

    # Shutdown
    logger.info("🛑 DakBox API shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Parcel booking, payment, rider delivery and payout backend",
    lifespan=lifespan
)

setup_middleware(app)
setup_exception_handlers(app)

app.include_router(api_router)

@app.get("/")
async def root():
    return {
        "message": "DakBox Server is running...",
        "version": settings.version,
        "status": "running",
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": "production" if not settings.debug else "development"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
