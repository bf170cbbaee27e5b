from fastapi import APIRouter, HTTPException, status

from stockcast.core.projection.domain import ProjectionInputError
from stockcast.schemas.projection import (
    ProjectionReportResponse,
    ProjectionRequest,
    ProjectionResponse,
)
from stockcast.services.projection import run_projection_request
from stockcast.services.projection_report import build_projection_report

router = APIRouter()


@router.post(
    "",
    response_model=ProjectionResponse,
)
def create_projection(request: ProjectionRequest):
    try:
        result = run_projection_request(request)
    except ProjectionInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return ProjectionResponse.model_validate(result)


@router.post(
    "/report",
    response_model=ProjectionReportResponse,
)
def create_projection_report(request: ProjectionRequest):
    """Projection plus chart window, weekly table and display labels."""
    try:
        result = run_projection_request(request)
    except ProjectionInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return build_projection_report(result)
