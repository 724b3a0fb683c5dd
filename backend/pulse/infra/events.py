"""In-process publish/subscribe bus.

A bus is constructed once by the application and handed to the collaborators
that publish or listen; nothing here is module-level state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Union[None, Awaitable[None]]]
Unsubscribe = Callable[[], None]


class EventBus:
	"""Topic keyed fan-out of payloads to registered handlers."""

	def __init__(self) -> None:
		self._handlers: Dict[str, List[Handler]] = defaultdict(list)

	def subscribe(self, topic: str, handler: Handler) -> Unsubscribe:
		self._handlers[topic].append(handler)

		def _unsubscribe() -> None:
			handlers = self._handlers.get(topic)
			if handlers and handler in handlers:
				handlers.remove(handler)

		return _unsubscribe

	def handler_count(self, topic: str) -> int:
		return len(self._handlers.get(topic, ()))

	async def publish(self, topic: str, payload: Any = None) -> None:
		"""Deliver ``payload`` to every handler of ``topic``.

		A failing handler is logged and does not prevent delivery to the others.
		"""
		handlers = list(self._handlers.get(topic, ()))
		if not handlers:
			return
		results = await asyncio.gather(
			*(self._invoke(handler, payload) for handler in handlers),
			return_exceptions=True,
		)
		for handler, result in zip(handlers, results):
			if isinstance(result, Exception):
				logger.error(
					"event handler failed topic=%s handler=%r",
					topic,
					handler,
					exc_info=(type(result), result, result.__traceback__),
				)

	@staticmethod
	async def _invoke(handler: Handler, payload: Any) -> None:
		outcome = handler(payload)
		if inspect.isawaitable(outcome):
			await outcome


__all__ = ["EventBus", "Handler", "Unsubscribe"]
