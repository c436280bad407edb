# parking_telemetry/routers/live.py
"""WS /ws/status — live feed of every ingested sensor status."""

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from parking_telemetry.services.live_status import LiveStatusHub, get_live_hub

router = APIRouter()


@router.websocket("/ws/status")
async def live_status(websocket: WebSocket, hub: LiveStatusHub = Depends(get_live_hub)):
    await hub.connect(websocket)
    try:
        while True:
            # Any client frame (pong or otherwise) counts as a liveness reply
            await websocket.receive_text()
            hub.mark_alive(websocket)
    except WebSocketDisconnect:
        hub.disconnect(websocket)
