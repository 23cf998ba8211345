"""WebSocket endpoint: one socket is one session."""

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from ..connections.ws_session import WebSocketSessionHandler

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def session_socket(websocket: WebSocket):
    """Connect, exchange upload/ask messages, and clean up on disconnect."""
    manager = getattr(websocket.app.state, "manager", None)
    if manager is None:
        await websocket.close(code=1013)  # try again later
        return

    await websocket.accept()
    session = manager.connect()
    handler = WebSocketSessionHandler(websocket, manager, session.session_id)

    try:
        await websocket.send_json(manager.greeting(session))
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            if message.get("text") is not None:
                await handler.handle_text(message["text"])
            elif message.get("bytes") is not None:
                await handler.handle_bytes(message["bytes"])
    except WebSocketDisconnect:
        pass
    finally:
        handler.close()
        await manager.disconnect(session.session_id)
