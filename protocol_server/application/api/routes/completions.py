"""
Completion Routes
=================

POST /v1/text/completions         ND-JSON stream (or only the terminal chunk as
                                  JSON when the body sets ``"stream": false``)
POST /v1/text/completions/stream  SSE stream, terminated by ``data: [DONE]``

FLOW:
-----
1. RequestValidator parses the body and resolves the session
   (failures become invalid_request / invalid_session envelopes)
2. CompletionService produces the reply and splits it into chunks
3. A StreamTransport frames and paces the chunks

Structured ``stats`` inputs are answered on the first route with a single
stat-analysis JSON document instead of a stream.

WIRE EXAMPLES:
--------------
ND-JSON:
    {"id":"req-1","delta":{"text":"Hello there!"}}
    {"id":"req-1","delta":{"text":" How can I assist"}}
    {"id":"req-1","delta":{"text":" you today?","finish_reason":"stop"},"usage":{...}}

SSE:
    data: {"id":"req-1","delta":{"text":"Hello there!"}}

    data: [DONE]
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import Response, StreamingResponse

from protocol_server.application.api.dependencies import (
    CompletionServiceDep,
    RequestValidatorDep,
    SessionStoreDep,
)
from protocol_server.core.config.constants import (
    MEDIA_TYPE_JSON,
    MEDIA_TYPE_NDJSON,
    MEDIA_TYPE_SSE,
)
from protocol_server.core.logging.logger import get_logger
from protocol_server.streaming.transport import StreamEncoding, encode_json

router = APIRouter(prefix="/v1/text", tags=["Completions"])
logger = get_logger(__name__)


@router.post(
    "/completions",
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Completion as an ND-JSON stream or a single JSON document",
            "content": {MEDIA_TYPE_NDJSON: {}, "application/json": {}},
        },
        400: {"description": "invalid_request or invalid_session"},
    },
)
async def text_completions(
    request: Request,
    validator: RequestValidatorDep,
    service: CompletionServiceDep,
    store: SessionStoreDep,
) -> Response:
    validated = validator.validate(await request.body())
    body = validated.request

    logger.info(
        "text_completion_requested",
        correlation_id=body.id,
        session_id=body.session_id,
        stream=body.stream,
        has_stats=body.inputs.stats is not None,
    )

    # ========================================================================
    # Structured input: deterministic stat analysis, never streamed
    # ========================================================================
    if body.inputs.stats is not None:
        analysis = service.analyze_stats(body, store)
        return Response(content=analysis.model_dump_json(), media_type=MEDIA_TYPE_JSON)

    chunks = service.build_chunks(body)

    if not body.stream:
        return Response(content=encode_json(chunks[-1]), media_type=MEDIA_TYPE_JSON)

    transport = service.open_transport(StreamEncoding.NDJSON, stream_id=body.id)
    return StreamingResponse(
        transport.stream(chunks),
        media_type=transport.media_type,
        headers=transport.headers,
    )


@router.post(
    "/completions/stream",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "SSE event stream", "content": {MEDIA_TYPE_SSE: {}}},
        400: {"description": "invalid_request or invalid_session"},
    },
)
async def stream_text_completions(
    request: Request,
    validator: RequestValidatorDep,
    service: CompletionServiceDep,
) -> StreamingResponse:
    validated = validator.validate(await request.body(), require_prompt=True)
    body = validated.request

    logger.info("sse_completion_requested", correlation_id=body.id, session_id=body.session_id)

    chunks = service.build_chunks(body)
    transport = service.open_transport(StreamEncoding.SSE, stream_id=body.id)

    return StreamingResponse(
        transport.stream(chunks),
        media_type=transport.media_type,
        headers=transport.headers,
    )
