"""Cancellation tokens for provider requests."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
	"""Read-only view of a cancellation request, handed to providers."""

	def __init__(self) -> None:
		self._cancelled = False
		self._callbacks: list[Callable[[], None]] = []

	@property
	def is_cancellation_requested(self) -> bool:
		return self._cancelled

	def on_cancellation_requested(self, callback: Callable[[], None]) -> Callable[[], None]:
		"""
		Register a callback run once when cancellation is requested.

		Args:
		    callback: Called synchronously from cancel(). Called immediately if already cancelled.

		Returns:
		    A function that unregisters the callback.
		"""
		if self._cancelled:
			callback()
			return lambda: None
		self._callbacks.append(callback)

		def remove() -> None:
			if callback in self._callbacks:
				self._callbacks.remove(callback)

		return remove

	def _cancel(self) -> None:
		if self._cancelled:
			return
		self._cancelled = True
		callbacks, self._callbacks = self._callbacks, []
		for callback in callbacks:
			try:
				callback()
			except Exception:
				logger.exception("Error in cancellation callback")


class CancellationTokenSource:
	"""Owner side of a CancellationToken."""

	def __init__(self) -> None:
		self._token = CancellationToken()

	@property
	def token(self) -> CancellationToken:
		return self._token

	def cancel(self) -> None:
		"""Signal cancellation. Safe to call more than once."""
		self._token._cancel()
