"""Publish/subscribe channel for symbol updates."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Listener = Callable[[T], "Awaitable[None] | None"]

logger = logging.getLogger(__name__)


class Disposable:
	"""Handle that releases a resource when disposed."""

	def __init__(self, on_dispose: Callable[[], None]) -> None:
		self._on_dispose: Callable[[], None] | None = on_dispose

	def dispose(self) -> None:
		if self._on_dispose is not None:
			on_dispose, self._on_dispose = self._on_dispose, None
			on_dispose()


def dispose_all(disposables: list[Disposable]) -> None:
	"""Dispose every item and empty the list."""
	while disposables:
		disposables.pop().dispose()


class Emitter(Generic[T]):
	"""
	Event emitter owned by a single producer.

	Subscribers register with ``event`` and receive a Disposable that
	removes them.
	Listeners may be plain callables or coroutine functions; a failing
	listener is logged and does not prevent delivery to the others.

	"""

	def __init__(self) -> None:
		self._listeners: list[Listener[T]] = []
		self._disposed = False

	def event(self, listener: Listener[T]) -> Disposable:
		"""
		Subscribe a listener.

		Args:
		    listener: Called with each fired value.

		Returns:
		    Disposable removing the listener.
		"""
		if self._disposed:
			return Disposable(lambda: None)
		self._listeners.append(listener)

		def remove() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return Disposable(remove)

	async def fire(self, data: T) -> None:
		"""Deliver data to every current listener in subscription order."""
		if self._disposed:
			return
		for listener in list(self._listeners):
			try:
				result = listener(data)
				if inspect.isawaitable(result):
					await result
			except Exception:
				logger.exception("Error in update listener %r", listener)

	@property
	def listener_count(self) -> int:
		return len(self._listeners)

	def dispose(self) -> None:
		self._disposed = True
		self._listeners.clear()
