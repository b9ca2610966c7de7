"""
Session Routes
==============

POST   /v1/session               open a session
DELETE /v1/session/{session_id}  close a session

Both handlers talk to the process-wide SessionStore injected through
``SessionStoreDep``. Closing an unknown (or already closed) session is
answered with 404 and error code ``invalid_session``.
"""

from fastapi import APIRouter, Request, status

from protocol_server.application.api.dependencies import SessionStoreDep
from protocol_server.application.api.models.protocol import (
    SessionCloseResponse,
    SessionCreateRequest,
    SessionCreateResponse,
)
from protocol_server.application.validators.request_validator import parse_payload
from protocol_server.core.exceptions import SessionNotFoundError
from protocol_server.core.logging.logger import get_logger

router = APIRouter(prefix="/v1/session", tags=["Session"])
logger = get_logger(__name__)


@router.post(
    "",
    response_model=SessionCreateResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"description": "invalid_request - malformed body"}},
)
async def create_session(request: Request, store: SessionStoreDep) -> SessionCreateResponse:
    """
    Open a new session.

    Request body: ``{"id": "...", "attributes": {"access_token": "..."}}``
    (both fields optional, and the body itself may be empty). The caller's
    ``id`` is echoed back.
    """
    raw = await request.body()
    body = parse_payload(SessionCreateRequest, raw if raw.strip() else {})
    logger.info("session_create_requested", correlation_id=body.id)

    session_id = store.create(access_token=body.attributes.access_token)
    return SessionCreateResponse(id=body.id, session_id=session_id)


@router.delete(
    "/{session_id}",
    response_model=SessionCloseResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "invalid_session - unknown or already closed"}},
)
async def close_session(session_id: str, store: SessionStoreDep) -> SessionCloseResponse:
    """Close a session. Repeating the call for the same id returns 404."""
    logger.info("session_close_requested", session_id=session_id)

    if not store.close(session_id):
        logger.warning("session_close_unknown", session_id=session_id)
        raise SessionNotFoundError(
            "Session not found or already closed",
            details={"session_id": session_id},
        )

    return SessionCloseResponse()
