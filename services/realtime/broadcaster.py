"""Fan out navigation events to every connected realtime client.

Each registered websocket gets its own bounded queue drained by a writer
task, so a slow or dead client never holds up the request that produced the
event or the other clients. Delivery is best effort: no acknowledgements, no
retries, and clients that connect later do not see earlier messages.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from starlette.websockets import WebSocketState

LOGGER = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


def _json_default(value: Any) -> Any:
	if isinstance(value, datetime):
		return value.isoformat()
	to_dict = getattr(value, "to_dict", None)
	if callable(to_dict):
		return to_dict()
	raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_event(event: Dict[str, Any]) -> str:
	"""Serialize a `{"type": ..., ...}` event to a single JSON text frame."""
	if not isinstance(event.get("type"), str) or not event["type"]:
		raise ValueError("Broadcast events need a non-empty string 'type'.")
	return json.dumps(event, default=_json_default)


def _is_open(websocket: Any) -> bool:
	state = getattr(websocket, "client_state", WebSocketState.CONNECTED)
	return state == WebSocketState.CONNECTED


class _Subscriber:
	"""A connected websocket plus its pending outbound messages."""

	def __init__(self, websocket: Any, queue_size: int) -> None:
		self.websocket = websocket
		self.queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
		self.task: Optional[asyncio.Task] = None
		self.closed = False


class Broadcaster:
	"""Track open realtime connections and push every event to all of them."""

	def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
		if queue_size < 1:
			raise ValueError("queue_size must be at least 1.")
		self.queue_size = queue_size
		self._subscribers: Dict[int, _Subscriber] = {}

	@property
	def connection_count(self) -> int:
		return len(self._subscribers)

	def register(self, websocket: Any) -> None:
		"""Start delivering broadcasts to an accepted websocket."""
		key = id(websocket)
		if key in self._subscribers:
			return
		subscriber = _Subscriber(websocket, self.queue_size)
		subscriber.task = asyncio.create_task(self._writer(subscriber))
		self._subscribers[key] = subscriber
		LOGGER.info("Realtime client connected (%d open)", len(self._subscribers))

	def unregister(self, websocket: Any) -> None:
		"""Stop delivering to a websocket; safe to call more than once."""
		subscriber = self._subscribers.get(id(websocket))
		if subscriber is None:
			return
		self._discard(subscriber)
		LOGGER.info("Realtime client disconnected (%d open)", len(self._subscribers))

	def broadcast(self, event: Dict[str, Any]) -> int:
		"""Queue `event` for every open connection and return how many were reached.

		Never raises for delivery problems. A client whose queue is full is
		disconnected instead of blocking the caller.
		"""
		message = encode_event(event)
		delivered = 0
		for subscriber in list(self._subscribers.values()):
			if subscriber.closed or not _is_open(subscriber.websocket):
				self._discard(subscriber)
				continue
			try:
				subscriber.queue.put_nowait(message)
			except asyncio.QueueFull:
				LOGGER.warning("Dropping realtime client with %d undelivered messages", subscriber.queue.qsize())
				self._discard(subscriber, close_code=1013)
				continue
			delivered += 1
		LOGGER.debug("Broadcast %s to %d client(s)", event["type"], delivered)
		return delivered

	async def flush(self) -> None:
		"""Wait until every queued message has been sent or abandoned."""
		pending: List[asyncio.Future] = [
			asyncio.ensure_future(subscriber.queue.join()) for subscriber in list(self._subscribers.values())
		]
		if pending:
			await asyncio.gather(*pending)

	async def close(self) -> None:
		"""Cancel every writer; used at application shutdown."""
		subscribers = list(self._subscribers.values())
		for subscriber in subscribers:
			self._discard(subscriber)
		tasks = [subscriber.task for subscriber in subscribers if subscriber.task is not None]
		if tasks:
			await asyncio.gather(*tasks, return_exceptions=True)

	async def _writer(self, subscriber: _Subscriber) -> None:
		while True:
			message = await subscriber.queue.get()
			try:
				await subscriber.websocket.send_text(message)
			except Exception as exc:  # noqa: BLE001
				LOGGER.debug("Realtime send failed, dropping client: %s", exc)
				self._discard(subscriber, cancel=False)
				return
			finally:
				subscriber.queue.task_done()

	def _discard(self, subscriber: _Subscriber, *, cancel: bool = True, close_code: Optional[int] = None) -> None:
		self._subscribers.pop(id(subscriber.websocket), None)
		if subscriber.closed:
			return
		subscriber.closed = True
		# Release anyone waiting in flush() on messages that will never be sent.
		while not subscriber.queue.empty():
			subscriber.queue.get_nowait()
			subscriber.queue.task_done()
		if cancel and subscriber.task is not None and subscriber.task is not asyncio.current_task():
			subscriber.task.cancel()
		if close_code is not None:
			asyncio.ensure_future(self._close_quietly(subscriber.websocket, close_code))

	@staticmethod
	async def _close_quietly(websocket: Any, code: int) -> None:
		try:
			await websocket.close(code=code)
		except Exception:  # noqa: BLE001
			LOGGER.debug("Closing dropped realtime client failed", exc_info=True)
