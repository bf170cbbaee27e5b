from fastapi import APIRouter, HTTPException, status

from stockcast.core.projection.domain import ProjectionInputError
from stockcast.schemas.product_forecast import (
    ForecastPortfolioRequest,
    ForecastPortfolioResponse,
    ProductForecastDetailResponse,
    ProductForecastRequest,
)
from stockcast.services.product_forecast import build_forecast_portfolio, build_product_forecast

router = APIRouter()


@router.post(
    "/product",
    response_model=ProductForecastDetailResponse,
)
def get_product_forecast(request: ProductForecastRequest):
    try:
        return build_product_forecast(
            product=request.product,
            shop=request.shop,
            today=request.today,
        )
    except ProjectionInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.post(
    "/portfolio",
    response_model=ForecastPortfolioResponse,
)
def get_forecast_portfolio(request: ForecastPortfolioRequest):
    return build_forecast_portfolio(
        products=request.products,
        shop=request.shop,
        today=request.today,
        search=request.search,
        vendor=request.vendor,
    )
