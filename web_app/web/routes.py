"""Short link routes: shorten, list, delete and the public redirect."""

from fastapi import APIRouter, Request

from ..api.schemas import (
    ShortenRequest,
    ShortenResponse,
    CodesResponse,
    DeleteResponse,
    ErrorResponse,
)
from ..dispatch import run_handler, to_response

router = APIRouter()


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not logged in"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
    },
    summary="Create short URL",
    description="Create a shortened URL. Optionally provide a custom short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    result = await run_handler(request, "POST", "/shorten", body=body.model_dump(exclude_none=True))
    return to_response(result)


@router.get(
    "/allCodes",
    response_model=CodesResponse,
    responses={401: {"model": ErrorResponse, "description": "Not logged in"}},
    summary="List my short URLs",
)
async def all_codes(request: Request):
    result = await run_handler(request, "GET", "/allCodes")
    return to_response(result)


@router.delete(
    "/{link_id}",
    response_model=DeleteResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not logged in"},
        404: {"model": ErrorResponse, "description": "No such short URL owned by the caller"},
    },
    summary="Delete one of my short URLs",
)
async def delete_code(request: Request, link_id: str):
    result = await run_handler(request, "DELETE", "/{id}", params={"id": link_id})
    return to_response(result)


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL (302)."""
    result = await run_handler(request, "GET", "/{code}", params={"code": short_code})
    return to_response(result)
