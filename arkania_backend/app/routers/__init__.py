"""
Routers de la API
Conjunto Residencial Arkania

Este módulo centraliza todos los routers de la aplicación.
"""
from fastapi import APIRouter

# Importar routers individuales
from app.routers import (
    apartments,
    auth,
    common_areas,
    correspondence,
    parking,
    roles,
    service_requests,
    user_roles,
    users,
)

# Router principal que incluye todos los sub-routers
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(roles.router)
api_router.include_router(user_roles.router)
api_router.include_router(apartments.router)
api_router.include_router(parking.router)
api_router.include_router(common_areas.router)
api_router.include_router(correspondence.router)
api_router.include_router(service_requests.router)

__all__ = ["api_router"]
