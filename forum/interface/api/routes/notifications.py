"""Notification websocket route."""

import logfire
from dishka import AsyncContainer
from fastapi import APIRouter, WebSocket, status

from forum.adapter.realtime.connection import Connection, WebSocketTransport
from forum.adapter.realtime.hub import ConnectionHub
from forum.config import HubSettings
from forum.domain.service import JWTService

router = APIRouter(tags=["notifications"])


@router.websocket("/ws/notifications")
async def notifications(websocket: WebSocket, token: str | None = None) -> None:
    """Upgrade to a notification connection.

    The token is passed as a query parameter because browsers can't set
    headers on websocket handshakes. Messages buffered while the user was
    offline are delivered first.

    Args:
        websocket: Incoming websocket
        token: JWT token
    """
    container: AsyncContainer = websocket.app.state.dishka_container
    jwt_service = await container.get(JWTService)

    user_id = await jwt_service.get_user_id_from_token(token)
    if not user_id:
        logfire.info("Rejected unauthenticated notification connection")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    hub = await container.get(ConnectionHub)
    settings = await container.get(HubSettings)

    await websocket.accept()
    connection = Connection(user_id, WebSocketTransport(websocket), settings)
    with logfire.span("notifications.connection", user_id=user_id):
        await connection.serve(hub)
