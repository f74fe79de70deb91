"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from app.schemas import WeatherResponse
from services.errors import ConfigurationError, UpstreamError
from services.weather import WeatherService, build_default_weather_service
from settings import get_settings

router = APIRouter()


def get_weather_service() -> WeatherService:
    return build_default_weather_service()


def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": get_settings().cors_allow_origin,
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Content-Type": "application/json",
    }


@router.get(
    "/api/weather",
    response_model=WeatherResponse,
    summary="Current reading, upstream 24h history and persisted trends.",
)
async def get_weather(
    service: WeatherService = Depends(get_weather_service),
    headers: Dict[str, str] = Depends(cors_headers),
) -> JSONResponse:
    try:
        payload = await service.get_weather()
    except ConfigurationError as exc:
        return JSONResponse(
            content={"error": str(exc)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=headers,
        )
    except UpstreamError as exc:
        return JSONResponse(
            content={"error": str(exc)},
            status_code=status.HTTP_502_BAD_GATEWAY,
            headers=headers,
        )
    return JSONResponse(content=payload.model_dump(mode="json"), headers=headers)


@router.options(
    "/api/weather",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="CORS preflight for the weather endpoint.",
)
async def weather_preflight(headers: Dict[str, str] = Depends(cors_headers)) -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
