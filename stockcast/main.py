import logging

from fastapi import FastAPI

from stockcast.api.v1.router import api_router
from stockcast.core.config import get_shop_defaults


logging.basicConfig(level=get_shop_defaults().log_level)

app = FastAPI(title="StockCast")
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def root():
    return {"status": "ok", "message": "StockCast backend running"}
