"""
Initialize Route

POST /v1/initialize - protocol handshake describing the server and what it
supports. The request body is accepted but not inspected.
"""

from fastapi import APIRouter

from protocol_server.application.api.dependencies import SettingsDep
from protocol_server.application.api.models.protocol import InitializeResponse, ServerInfo
from protocol_server.core.config.constants import SERVER_CAPABILITIES, SERVER_DESCRIPTION

router = APIRouter(prefix="/v1", tags=["Protocol"])


@router.post("/initialize", response_model=InitializeResponse)
async def initialize(settings: SettingsDep) -> InitializeResponse:
    return InitializeResponse(
        server=ServerInfo(
            name=settings.app.APP_NAME,
            version=settings.app.APP_VERSION,
            description=SERVER_DESCRIPTION,
        ),
        capabilities=list(SERVER_CAPABILITIES),
    )
