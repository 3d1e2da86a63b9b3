"""
Live update socket.

Clients connect to ``/socket`` and receive ``{"event": ..., "data": ...}``
frames for every committed change. Nothing is read from the client; the
receive loop only keeps the connection open until it drops.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from fakeso.services.events import manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["socket"])


@router.websocket("/socket")
async def socket_endpoint(websocket: WebSocket):
    await manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Socket client disconnected")
    finally:
        manager.disconnect(websocket)
