from fastapi import APIRouter

from stockcast.api.v1.endpoints import (
    product_forecast,
    projection,
)

api_router = APIRouter()

api_router.include_router(projection.router, prefix="/projection", tags=["projection"])
api_router.include_router(product_forecast.router, prefix="/forecast", tags=["forecast"])
