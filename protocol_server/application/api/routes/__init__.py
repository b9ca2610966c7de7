from protocol_server.application.api.routes.completions import router as completions_router
from protocol_server.application.api.routes.health import router as health_router
from protocol_server.application.api.routes.initialize import router as initialize_router
from protocol_server.application.api.routes.oauth import router as oauth_router
from protocol_server.application.api.routes.session import router as session_router

__all__ = [
    "completions_router",
    "health_router",
    "initialize_router",
    "oauth_router",
    "session_router",
]
