"""API routes implementation."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from linkdash.common.url_builder import build_short_url
from linkdash.database.models import Link
from linkdash.errors import ErrorKind, LinkResult
from .dependencies import get_owner_id
from .schemas import (
    FailureResponse,
    HealthResponse,
    LinkEnvelope,
    LinkListResponse,
    LinkRequest,
    LinkResponse,
    ResolveResponse,
)

router = APIRouter()

ERROR_STATUS = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CODE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.CODE_EXHAUSTED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

FAILURES = {
    code: {"model": FailureResponse}
    for code in (400, 401, 403, 404, 409, 500, 503)
}


def _link_response(request: Request, link: Link) -> LinkResponse:
    config = request.app.state.config
    return LinkResponse(
        id=link.id,
        code=link.code,
        short_url=build_short_url(
            short_code=link.code,
            base_url=request.state.base_url,
            path_prefix=config.path_prefix,
        ),
        target_url=link.target_url,
        owner_id=link.owner_id,
        created_at=link.created_at,
        updated_at=link.updated_at,
    )


def _failure(kind: ErrorKind, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if kind is ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(
        status_code=ERROR_STATUS[kind],
        content=FailureResponse(error=kind.value, message=message).model_dump(),
        headers=headers,
    )


def _respond(request: Request, result: LinkResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Render a mutation result as JSON with a matching status code."""
    if not result.ok:
        return _failure(result.error, result.message)
    envelope = LinkEnvelope(value=_link_response(request, result.value))
    return JSONResponse(status_code=success_status, content=jsonable_encoder(envelope))


@router.post(
    "/links",
    status_code=status.HTTP_201_CREATED,
    response_model=LinkEnvelope,
    responses=FAILURES,
    summary="Create short link",
    description="Create a short link owned by the caller. Optionally provide a custom code.",
)
async def create_link(
    request: Request,
    body: LinkRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """Create a short link."""
    service = request.app.state.service
    
    result = await service.create(
        owner_id=owner_id,
        target_url=body.url,
        desired_code=body.code,
    )
    return _respond(request, result, success_status=status.HTTP_201_CREATED)


@router.get(
    "/links",
    response_model=LinkListResponse,
    responses={401: {"model": FailureResponse}},
    summary="List my links",
)
async def list_links(request: Request, owner_id: Optional[str] = Depends(get_owner_id)):
    """List the caller's links, newest first."""
    service = request.app.state.service
    
    if not owner_id:
        return _failure(ErrorKind.UNAUTHENTICATED, "Authentication required")
    
    links = await service.list_by_owner(owner_id)
    return LinkListResponse(
        items=[_link_response(request, link) for link in links],
        total=len(links),
    )


@router.put(
    "/links/{link_id}",
    response_model=LinkEnvelope,
    responses=FAILURES,
    summary="Update short link",
    description="Change the target URL and optionally the code of a link you own.",
)
async def update_link(
    request: Request,
    link_id: int,
    body: LinkRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """Update a short link."""
    service = request.app.state.service
    
    result = await service.update(
        owner_id=owner_id,
        link_id=link_id,
        target_url=body.url,
        desired_code=body.code,
    )
    return _respond(request, result)


@router.delete(
    "/links/{link_id}",
    response_model=LinkEnvelope,
    responses=FAILURES,
    summary="Delete short link",
)
async def delete_link(
    request: Request,
    link_id: int,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """Delete a short link."""
    service = request.app.state.service
    
    result = await service.delete(owner_id=owner_id, link_id=link_id)
    return _respond(request, result)


@router.get(
    "/resolve/{code}",
    response_model=ResolveResponse,
    responses={404: {"model": FailureResponse}},
    summary="Resolve short code",
)
async def resolve_code(request: Request, code: str):
    """Look up the target of a short code (no authentication)."""
    service = request.app.state.service
    
    link = await service.get_by_code(code)
    if link is None:
        return _failure(ErrorKind.NOT_FOUND, f"Short code '{code}' not found")
    
    return ResolveResponse(code=link.code, target_url=link.target_url)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Health check endpoint."""
    service = request.app.state.service
    
    health = await service.health_check()
    
    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
