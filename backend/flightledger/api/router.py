from fastapi import APIRouter

from flightledger.api.routes import health, auth, airports, flights, bookings, owner, admin

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # POST /login, /register, /register-owner
api_router.include_router(airports.router, prefix="/airports", tags=["airports"])
api_router.include_router(flights.router, prefix="/flights", tags=["flights"])  # search, detail, owner CRUD
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(owner.router, prefix="/owner", tags=["owner"])  # flight owner self-service
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])  # admin endpoints
