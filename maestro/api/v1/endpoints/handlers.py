"""Handler introspection endpoint -- lists all registered handlers."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from maestro.api.v1.schemas.handler import HandlerInfo, HandlersListResponse
from maestro.dependencies import get_handler_registry
from maestro.handlers.registry import HandlerRegistry

router = APIRouter()


@router.get(
    "/handlers",
    response_model=HandlersListResponse,
    summary="List available handlers",
    description="Return role and skills for every handler, in selection order.",
)
async def list_handlers(
    registry: HandlerRegistry = Depends(get_handler_registry),
) -> HandlersListResponse:
    handlers = [
        HandlerInfo(
            name=m.name,
            role=m.role,
            skills=m.skills,
            description=m.description,
            version=m.version,
        )
        for m in registry.list_all()
    ]
    return HandlersListResponse(handlers=handlers, total=len(handlers))
