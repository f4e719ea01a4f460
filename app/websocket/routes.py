# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for real-time events. Only mounted in main mode.
#
# Connect: ws://host/api/ws/{room}
#
# Events:
#   - {"type": "connected", "room": "..."}
#   - {"type": "verifications_purged", "deleted": 3}
# =============================================================================

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.websocket.manager import websocket_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/{room}")
async def room_websocket(websocket: WebSocket, room: str):
    """
    WebSocket endpoint for real-time room updates.

    Clients may send "ping" to receive "pong" as a keepalive.
    """
    await websocket_manager.connect(room, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "room": room,
            "message": "Connected to room updates"
        })

        while True:
            data = await websocket.receive_text()

            # Handle ping/pong for keepalive
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug(f"WebSocket received: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected from room {room}")
    finally:
        websocket_manager.disconnect(room, websocket)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics for this process.
    """
    rooms = websocket_manager.get_active_rooms()
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "active_rooms": rooms,
        "room_count": len(rooms)
    }
