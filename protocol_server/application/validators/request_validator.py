"""
Completion Request Validator

Turns a raw request body into a CompletionRequest bound to a live session.

VALIDATION SEQUENCE:
--------------------
1. Body is JSON and a JSON object         → else invalid_request
2. Body matches the CompletionRequest model
   (session_id present, prompt or stats)  → else invalid_request
3. Optionally, a prompt is present        → else invalid_request
4. session_id names a live session        → else invalid_session

Failures raise typed ProtocolError subclasses carrying the caller's request id
whenever the body had one, so the error envelope can echo it.
"""

from dataclasses import dataclass
from typing import Any, TypeVar

import orjson
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from protocol_server.application.api.models.protocol import CompletionRequest
from protocol_server.core.exceptions import InvalidRequestError, InvalidSessionError
from protocol_server.core.logging.logger import get_logger
from protocol_server.session.store import SessionRecord, SessionStore

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidatedRequest:
    """A parsed completion request together with its live session."""

    request: CompletionRequest
    session: SessionRecord


def _correlation_id(payload: Any) -> str | None:
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, str) and request_id:
            return request_id
    return None


def _describe(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{location}: {first.get('msg', 'invalid value')}"


def decode_body(raw: bytes | str) -> dict[str, Any]:
    """
    Decode a JSON object body.

    Raises:
        InvalidRequestError: If the body is empty, not JSON, or not an object
    """
    if not raw or not raw.strip():
        raise InvalidRequestError("Request body is empty")

    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise InvalidRequestError.from_exception(e, "Request body is not valid JSON")

    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return payload


def parse_payload(model: type[ModelT], raw: bytes | str | dict[str, Any]) -> ModelT:
    """
    Parse a request body into ``model``.

    Args:
        model: Pydantic model class to validate against
        raw: Raw body bytes/text, or an already decoded JSON object

    Raises:
        InvalidRequestError: On any decoding or validation failure
    """
    payload = raw if isinstance(raw, dict) else decode_body(raw)

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidRequestError(
            f"Missing or invalid {model.__name__} fields ({_describe(e)})",
            correlation_id=_correlation_id(payload),
            details={"errors": e.errors(include_url=False, include_context=False)},
        )


class RequestValidator:
    """
    Validates completion requests against the session store.

    Usage:
        validator = RequestValidator(session_store)
        validated = validator.validate(await request.body())
        validated.session.analysis_history  # live record, passed through
    """

    def __init__(self, session_store: SessionStore):
        self.session_store = session_store

    def validate(
        self,
        raw: bytes | str | dict[str, Any],
        require_prompt: bool = False,
    ) -> ValidatedRequest:
        """
        Validate a completion request body.

        Args:
            raw: Request body
            require_prompt: Reject requests that only carry structured stats

        Returns:
            ValidatedRequest with the parsed request and the live session

        Raises:
            InvalidRequestError: Malformed body or missing required fields
            InvalidSessionError: Unknown or expired session
        """
        request = parse_payload(CompletionRequest, raw)

        if require_prompt and not request.inputs.has_prompt:
            raise InvalidRequestError(
                "Streaming requires a non-empty prompt",
                correlation_id=request.id,
            )

        session = self.session_store.lookup(request.session_id)
        if session is None:
            logger.warning("invalid_session", session_id=request.session_id, correlation_id=request.id)
            raise InvalidSessionError(
                "Invalid or expired session ID",
                correlation_id=request.id,
                details={"session_id": request.session_id},
            )

        return ValidatedRequest(request=request, session=session)
