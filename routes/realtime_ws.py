"""WebSocket endpoint that pushes navigation events to connected clients."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from services.realtime.broadcaster import Broadcaster

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
	"""Keep a push-only connection open; inbound frames are read and ignored."""
	broadcaster: Broadcaster = websocket.app.state.broadcaster
	await websocket.accept()
	broadcaster.register(websocket)
	try:
		while True:
			message = await websocket.receive()
			if message["type"] == "websocket.disconnect":
				break
	except WebSocketDisconnect:
		pass
	except Exception as exc:
		LOGGER.warning("Realtime connection failed: %s", exc)
	finally:
		broadcaster.unregister(websocket)
