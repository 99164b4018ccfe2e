# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.modules.users import router as users_router
from app.modules.riders import router as riders_router
from app.modules.parcels import router as parcels_router
from app.modules.payments import router as payments_router
from app.modules.cashouts import router as cashouts_router
from app.modules.reviews import router as reviews_router
from app.modules.dashboard import router as dashboard_router

# Main API router; paths are absolute (/parcels, /admin/..., /rider/...)
api_router = APIRouter()

api_router.include_router(auth_router)

api_router.include_router(users_router, tags=["Users"])

api_router.include_router(riders_router, tags=["Riders"])

api_router.include_router(parcels_router, tags=["Parcels"])

api_router.include_router(payments_router, tags=["Payments"])

api_router.include_router(cashouts_router, tags=["Cash-outs"])

api_router.include_router(reviews_router, tags=["Reviews"])

api_router.include_router(dashboard_router, tags=["Dashboard"])
