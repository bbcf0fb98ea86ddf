"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import CategorySummaryOut, ReadingCreated, ReadingIn, SummaryResponse
from services.readings import ReadingService, build_default_service

router = APIRouter()


def get_service() -> ReadingService:
    return build_default_service()


@router.post(
    "/api/readings",
    status_code=status.HTTP_201_CREATED,
    response_model=ReadingCreated,
    summary="Store a validated sensor reading.",
)
def create_reading(
    reading: ReadingIn,
    service: ReadingService = Depends(get_service),
) -> ReadingCreated:
    try:
        stored = service.record(reading)
    except OSError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error writing to reading store.",
        ) from exc
    return ReadingCreated(data=stored)


@router.get(
    "/api/readings/summary",
    response_model=SummaryResponse,
    response_model_exclude_none=True,
    summary="Minimum, maximum and average per pollutant, optionally for one sensor.",
)
def get_summary(
    sensor_id: Optional[str] = Query(None, alias="sensorId"),
    service: ReadingService = Depends(get_service),
) -> SummaryResponse:
    try:
        summary = service.summarize(sensor_id=sensor_id)
    except OSError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error reading from reading store.",
        ) from exc
    return SummaryResponse(
        summary={
            category: CategorySummaryOut.from_domain(stats)
            for category, stats in summary.items()
        }
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
