from fastapi import APIRouter

from . import auth, emails, health, occupants, properties, users

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(properties.router)
api_router.include_router(occupants.router)
api_router.include_router(emails.router)
