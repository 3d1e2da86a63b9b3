"""
Live update publishing.

Business logic only knows the ``EventPublisher`` protocol. The WebSocket
``ConnectionManager`` below is the production implementation; it pushes every
event to every connected client after the write has been committed.
"""

import enum
import logging
from typing import List, Protocol

from fastapi import WebSocket
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Event(str, enum.Enum):
    QUESTION_UPDATE = "questionUpdate"
    ANSWER_UPDATE = "answerUpdate"
    COMMENT_UPDATE = "commentUpdate"
    VOTE_UPDATE = "voteUpdate"
    VIEWS_UPDATE = "viewsUpdate"
    USER_UPDATE = "userUpdate"


class EventPublisher(Protocol):
    async def publish(self, event: Event, payload: BaseModel) -> None:
        ...


def encode_event(event: Event, payload: BaseModel) -> dict:
    return {"event": event.value, "data": payload.model_dump(mode="json", by_alias=True)}


class ConnectionManager:
    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: dict):
        # Iterate over a copy so a failing socket can be dropped mid-loop
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping websocket after failed send: {e}")
                self.disconnect(connection)

    async def publish(self, event: Event, payload: BaseModel) -> None:
        await self.broadcast(encode_event(event, payload))


manager = ConnectionManager()


def get_publisher() -> EventPublisher:
    """FastAPI dependency returning the process-wide publisher."""
    return manager

