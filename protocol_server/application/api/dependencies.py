"""
FastAPI Dependency Injection Module
===================================

Reusable dependencies that hand application singletons to route handlers.

The singletons (settings, session store, completion service) are created once
by ``create_app`` and stored on ``app.state``. Handlers never import them from
module globals; they declare a dependency and FastAPI resolves it per request:

    @router.post("/session")
    async def create_session(store: SessionStoreDep): ...

Tests swap implementations by building an app with their own objects.
"""

from typing import Annotated

from fastapi import Depends, Request

from protocol_server.application.services.completion_service import CompletionService
from protocol_server.application.validators.request_validator import RequestValidator
from protocol_server.core.config.settings import Settings
from protocol_server.session.store import SessionStore

# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    """
    Retrieve the process-wide SessionStore from application state.

    Raises:
        RuntimeError: If the app was not built by ``create_app``
    """
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise RuntimeError("SessionStore not initialized on app.state")
    return store


def get_completion_service(request: Request) -> CompletionService:
    return request.app.state.completion_service


def get_request_validator(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> RequestValidator:
    return RequestValidator(store)


# ============================================================================
# TYPE ALIASES
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
CompletionServiceDep = Annotated[CompletionService, Depends(get_completion_service)]
RequestValidatorDep = Annotated[RequestValidator, Depends(get_request_validator)]
