# parking_telemetry/services/live_status.py
"""
Live status broadcast hub.
Every WebSocket subscriber receives each ingested status as JSON.

Liveness: each probe marks all subscribers stale and sends {"type": "ping"};
any message from a client marks it alive again. A subscriber still stale at
the next probe, or whose send fails, is evicted.
"""

import asyncio
from typing import Optional
from parking_telemetry.config import settings
from parking_telemetry.utils.logger import get_logger

logger = get_logger(__name__)


class LiveStatusHub:
    def __init__(self, heartbeat_seconds: int = 30):
        self.heartbeat_seconds = heartbeat_seconds
        self._alive: dict = {}      # websocket → responded since last probe
        self._heartbeat_task: Optional[asyncio.Task] = None

    @property
    def subscriber_count(self) -> int:
        return len(self._alive)

    async def connect(self, websocket):
        await websocket.accept()
        self._alive[websocket] = True
        logger.info(f"[LIVE] subscriber connected ({self.subscriber_count} total)")

    def disconnect(self, websocket):
        if self._alive.pop(websocket, None) is not None:
            logger.info(f"[LIVE] subscriber disconnected ({self.subscriber_count} total)")

    def mark_alive(self, websocket):
        if websocket in self._alive:
            self._alive[websocket] = True

    async def _send(self, websocket, message: dict) -> bool:
        try:
            await websocket.send_json(message)
            return True
        except Exception as e:
            logger.warning(f"[LIVE] send failed ({type(e).__name__}) — evicting subscriber")
            self.disconnect(websocket)
            return False

    async def broadcast(self, message: dict) -> int:
        """Send to every subscriber; returns how many received it."""
        delivered = 0
        for websocket in list(self._alive):
            if await self._send(websocket, message):
                delivered += 1
        return delivered

    async def probe(self):
        for websocket, alive in list(self._alive.items()):
            if not alive:
                logger.info("[LIVE] terminating unresponsive subscriber")
                self.disconnect(websocket)
                try:
                    await websocket.close()
                except Exception:
                    logger.debug("[LIVE] close on dead subscriber failed", exc_info=True)
                continue
            self._alive[websocket] = False
            await self._send(websocket, {"type": "ping"})

    async def _heartbeat_loop(self):
        while True:
            await asyncio.sleep(self.heartbeat_seconds)
            await self.probe()

    def start_heartbeat(self):
        if self._heartbeat_task is None or self._heartbeat_task.done():
            self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def stop_heartbeat(self):
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            try:
                await self._heartbeat_task
            except asyncio.CancelledError:
                pass
            self._heartbeat_task = None


hub = LiveStatusHub(settings.LIVE_HEARTBEAT_SECONDS)


def get_live_hub() -> LiveStatusHub:
    """FastAPI dependency — the process-wide hub."""
    return hub
