"""HTTP route definitions for the service."""

from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from app.schemas import HealthStatus, IngestAck
from services.ingestion import IngestionService, build_default_service

router = APIRouter()


def get_service() -> IngestionService:
    return build_default_service()


async def _read_json_body(request: Request) -> Any:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("application/json"):
        return {}
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body is not valid JSON.",
        ) from exc


@router.post(
    "/readings",
    response_model=IngestAck,
    summary="Store the latest reading pushed by a device.",
)
async def push_reading(
    request: Request,
    service: IngestionService = Depends(get_service),
) -> IngestAck:
    payload = await _read_json_body(request)
    service.ingest(payload)
    return IngestAck()


@router.get(
    "/latest",
    summary="Fetch the latest reading for a device, or an empty object.",
)
async def get_latest(
    device_id: Optional[str] = Query(
        None,
        alias="deviceId",
        description="Device identifier; defaults to the configured sentinel.",
    ),
    service: IngestionService = Depends(get_service),
) -> JSONResponse:
    reading = service.latest(device_id)
    if reading is None:
        return JSONResponse(content={})
    return JSONResponse(content=reading.to_payload())


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    service: IngestionService = Depends(get_service),
) -> HealthStatus:
    device_ids = service.store.device_ids()
    return HealthStatus(devices=len(device_ids), device_ids=device_ids)


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
