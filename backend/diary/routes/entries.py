"""
Diary Backend — Entries Route Handlers
========================================

What:  REST surface for diary entries under /api/entries.
How:   Parses path/query/body, delegates to the EntryServiceBase stored on
       app.state, and turns Err / absent results into exceptions that the
       global handlers in main.py render.
Who:   Called by the diary frontend.

Routes:
    POST   /api/entries              201 entry        | 400
    GET    /api/entries              200 [entry]
    GET    /api/entries/search?q=    200 [entry]      | 400 when q is absent
    GET    /api/entries/{id}         200 entry        | 400 | 404
    PUT    /api/entries/{id}         200 entry        | 400 | 404
    DELETE /api/entries/{id}         204              | 400 | 404

/entries/search is registered before /entries/{id} so "search" is never
taken for an id.
"""

import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from diary.exceptions import MissingKeywordError, NotFoundError
from diary.models.entry import MAX_ENTRY_ID
from diary.result import unwrap
from diary.schemas.entry import EntryPayload, EntryRecord, ErrorResponse
from diary.services.entry_base import EntryServiceBase

router = APIRouter(prefix="/api", tags=["Entries"])

# ASCII digits only; str.isdigit() would also accept other scripts' digits
_ID_PATTERN = re.compile(r"^[0-9]+$")


def get_entry_service(request: Request) -> EntryServiceBase:
    """FastAPI dependency returning the service built by create_app()."""
    return request.app.state.entry_service


def parse_entry_id(raw: str) -> int:
    """
    Convert the {id} path segment to an int.

    Raises HTTPException(400, "Invalid ID format") unless the segment is all
    decimal digits and fits the store's integer range.
    """
    if not _ID_PATTERN.fullmatch(raw):
        raise HTTPException(status_code=400, detail="Invalid ID format")
    entry_id = int(raw)
    if entry_id > MAX_ENTRY_ID:
        raise HTTPException(status_code=400, detail="Invalid ID format")
    return entry_id


_BAD_REQUEST = {"description": "Validation failed", "model": ErrorResponse}
_NOT_FOUND = {"description": "Entry not found", "model": ErrorResponse}


@router.post(
    "/entries",
    status_code=201,
    response_model=EntryRecord,
    responses={400: _BAD_REQUEST},
    summary="Create a diary entry",
)
async def create_entry(
    payload: EntryPayload,
    service: EntryServiceBase = Depends(get_entry_service),
) -> EntryRecord:
    return unwrap(await service.create_entry(payload.date, payload.content))


@router.get(
    "/entries",
    response_model=List[EntryRecord],
    summary="List all diary entries",
    description="Entries ordered by date (newest first), then by id (newest first).",
)
async def list_entries(
    service: EntryServiceBase = Depends(get_entry_service),
) -> List[EntryRecord]:
    return await service.get_all_entries()


@router.get(
    "/entries/search",
    response_model=List[EntryRecord],
    responses={400: _BAD_REQUEST},
    summary="Search entries by keyword",
    description=(
        "Case-insensitive substring match on entry content. `%` and `_` match "
        "literally. An empty `q` returns every entry."
    ),
)
async def search_entries(
    q: Optional[str] = Query(default=None, description="Keyword to look for in content"),
    service: EntryServiceBase = Depends(get_entry_service),
) -> List[EntryRecord]:
    if q is None:
        raise MissingKeywordError("'q' parameter is required for search.", field=None)
    return unwrap(await service.search_entries(q))


@router.get(
    "/entries/{entry_id}",
    response_model=EntryRecord,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
    summary="Get a single entry",
)
async def get_entry(
    entry_id: str,
    service: EntryServiceBase = Depends(get_entry_service),
) -> EntryRecord:
    parsed_id = parse_entry_id(entry_id)
    entry = unwrap(await service.get_entry_by_id(parsed_id))
    if entry is None:
        raise NotFoundError(resource="Entry", resource_id=parsed_id)
    return entry


@router.put(
    "/entries/{entry_id}",
    response_model=EntryRecord,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
    summary="Replace an entry's date and content",
)
async def update_entry(
    entry_id: str,
    payload: EntryPayload,
    service: EntryServiceBase = Depends(get_entry_service),
) -> EntryRecord:
    parsed_id = parse_entry_id(entry_id)
    entry = unwrap(await service.update_entry(parsed_id, payload.date, payload.content))
    if entry is None:
        raise NotFoundError(resource="Entry", resource_id=parsed_id)
    return entry


@router.delete(
    "/entries/{entry_id}",
    status_code=204,
    response_class=Response,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
    summary="Delete an entry",
)
async def delete_entry(
    entry_id: str,
    service: EntryServiceBase = Depends(get_entry_service),
) -> Response:
    parsed_id = parse_entry_id(entry_id)
    if not await service.delete_entry(parsed_id):
        raise NotFoundError(resource="Entry", resource_id=parsed_id)
    return Response(status_code=204)
