from fastapi import APIRouter
from app.api.v1.routes.auth import router as auth_router
from app.api.v1.routes.public import router as public_router
from app.api.v1.routes.company import router as company_router
from app.api.v1.routes.bookings import router as bookings_router
from app.api.v1.routes.keyholder import router as keyholder_router
from app.api.v1.routes.store import router as store_router
from app.api.v1.routes.admin import router as admin_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(public_router)
api_router.include_router(company_router)
api_router.include_router(bookings_router)
api_router.include_router(keyholder_router)
api_router.include_router(store_router)
api_router.include_router(admin_router)
