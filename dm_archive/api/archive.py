"""
Archive endpoints: store kind 4 events and query what was stored.
"""
import json
from typing import Annotated, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from dm_archive.core.errors import (
    ArchiveError,
    InvalidParameterError,
    RouteNotFoundError,
)
from dm_archive.core.logging import get_logger
from dm_archive.schemas.event import ErrorResponse, NostrEvent, ReceiverCounts
from dm_archive.services.archiver import archive_event
from dm_archive.services.query import QueryEngine
from dm_archive.services.store import ArchiveStore, get_store

logger = get_logger(__name__)

router = APIRouter(tags=["Archive"])

ALLOWED_METHODS = "OPTIONS, GET, PUT"


@router.options("/{path:path}", summary="Allowed methods")
async def options(path: str) -> Response:
    """Always 200 with an empty body."""
    return Response(status_code=200, headers={"allow": ALLOWED_METHODS})


@router.put(
    "/{path:path}",
    responses={
        200: {"description": "Event archived"},
        400: {"model": ErrorResponse, "description": "Invalid event, wrong kind or bad pubkey"},
    },
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": NostrEvent.model_json_schema()}}}},
    summary="Archive a direct message",
)
async def put_event(
    path: str,
    request: Request,
    store: Annotated[ArchiveStore, Depends(get_store)],
) -> Response:
    """
    Archive a kind 4 event under ``sender_npub:receiver_npub:created_at``.
    
    A body that is not JSON is treated as an empty object and rejected.
    """
    body = await request.body()
    try:
        raw = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Invalid JSON in archive request: {e}")
        raw = {}
    
    try:
        archive_event(store, raw)
    except ArchiveError as e:
        logger.warning(
            "Rejected event",
            extra={"extra_data": {"error": type(e).__name__, "detail": e.message}}
        )
        raise
    
    return Response(status_code=200)


@router.get(
    "/",
    response_model=List[str],
    responses={400: {"model": ErrorResponse, "description": "Missing sender or receiver"}},
    summary="List a conversation",
)
async def list_conversation(
    store: Annotated[ArchiveStore, Depends(get_store)],
    sender: Annotated[Optional[str], Query(description="Sender npub")] = None,
    receiver: Annotated[Optional[str], Query(description="Receiver npub")] = None,
) -> List[str]:
    """Keys of every message from sender to receiver, in key order."""
    return QueryEngine(store).list_conversation(sender, receiver)


@router.get(
    "/counts",
    response_model=ReceiverCounts,
    responses={400: {"model": ErrorResponse, "description": "Missing sender or bad since"}},
    summary="Count messages per receiver",
)
async def count_messages(
    store: Annotated[ArchiveStore, Depends(get_store)],
    sender: Annotated[Optional[str], Query(description="Sender npub")] = None,
    receiver: Annotated[Optional[str], Query(description="Only count this receiver")] = None,
    since: Annotated[Optional[str], Query(description="Unix seconds, inclusive lower bound")] = None,
) -> Dict[str, int]:
    """
    Map of receiver npub to number of messages archived from sender.
    
    - **sender**: required
    - **receiver**: restrict to one receiver
    - **since**: drop messages created before this timestamp
    """
    since_ts = None
    if since is not None:
        try:
            since_ts = int(since)
        except ValueError:
            raise InvalidParameterError("since must be an integer timestamp")
    
    return QueryEngine(store).count_by_receiver(sender, receiver, since_ts)


@router.get("/{path:path}", include_in_schema=False)
async def unknown_route(path: str) -> None:
    raise RouteNotFoundError()

