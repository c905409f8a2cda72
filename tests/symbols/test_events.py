"""Tests for cancellation tokens and the update emitter."""

import logging

import pytest

from docsymbols.symbols.cancellation import CancellationTokenSource
from docsymbols.symbols.events import Disposable, Emitter, dispose_all


@pytest.mark.unit
@pytest.mark.symbols
class TestCancellation:
	"""Token sources and their callbacks."""

	def test_cancel_runs_callbacks_once(self) -> None:
		"""Test that callbacks run once and removed callbacks never run."""
		# Arrange
		source = CancellationTokenSource()
		calls = []
		source.token.on_cancellation_requested(lambda: calls.append("a"))
		remove = source.token.on_cancellation_requested(lambda: calls.append("b"))
		remove()

		# Act
		source.cancel()
		source.cancel()

		# Assert
		assert source.token.is_cancellation_requested
		assert calls == ["a"]

	def test_callback_after_cancel_runs_immediately(self) -> None:
		"""Test that registering on a cancelled token calls back at once."""
		# Arrange
		source = CancellationTokenSource()
		source.cancel()
		calls = []

		# Act
		source.token.on_cancellation_requested(lambda: calls.append(1))

		# Assert
		assert calls == [1]

	def test_failing_callback_does_not_stop_others(self, caplog: pytest.LogCaptureFixture) -> None:
		"""Test that an error in one callback is logged and the rest still run."""
		# Arrange
		source = CancellationTokenSource()
		calls = []

		def broken() -> None:
			msg = "boom"
			raise RuntimeError(msg)

		source.token.on_cancellation_requested(broken)
		source.token.on_cancellation_requested(lambda: calls.append("after"))

		# Act
		with caplog.at_level(logging.ERROR, logger="docsymbols.symbols.cancellation"):
			source.cancel()

		# Assert
		assert calls == ["after"]
		assert "Error in cancellation callback" in caplog.text


@pytest.mark.unit
@pytest.mark.symbols
class TestEmitter:
	"""Delivery of fired values to listeners."""

	async def test_fire_after_dispose_is_ignored(self) -> None:
		"""Test that a disposed emitter drops its listeners and stops delivering."""
		# Arrange
		emitter: Emitter[int] = Emitter()
		received = []
		emitter.event(received.append)

		# Act
		await emitter.fire(1)
		emitter.dispose()
		await emitter.fire(2)

		# Assert
		assert received == [1]
		assert emitter.listener_count == 0

	async def test_async_listener_is_awaited(self) -> None:
		"""Test that coroutine listeners finish before fire returns."""
		# Arrange
		emitter: Emitter[str] = Emitter()
		received = []

		async def listener(value: str) -> None:
			received.append(value)

		emitter.event(listener)

		# Act
		await emitter.fire("tree")

		# Assert
		assert received == ["tree"]

	async def test_failing_listener_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
		"""Test that a raising listener does not keep later listeners from the value."""
		# Arrange
		emitter: Emitter[int] = Emitter()
		received = []

		def broken(value: int) -> None:
			msg = f"cannot handle {value}"
			raise ValueError(msg)

		emitter.event(broken)
		emitter.event(received.append)

		# Act
		with caplog.at_level(logging.ERROR, logger="docsymbols.symbols.events"):
			await emitter.fire(3)

		# Assert
		assert received == [3]
		assert "Error in update listener" in caplog.text

	async def test_disposed_subscription_stops_delivery(self) -> None:
		"""Test that disposing the returned handle unsubscribes the listener."""
		# Arrange
		emitter: Emitter[int] = Emitter()
		received = []
		subscription = emitter.event(received.append)

		# Act
		subscription.dispose()
		subscription.dispose()
		await emitter.fire(1)

		# Assert
		assert received == []
		assert emitter.listener_count == 0

	def test_dispose_all(self) -> None:
		"""Test that every disposable is released and the list emptied."""
		# Arrange
		released = []
		disposables = [Disposable(lambda: released.append(1)), Disposable(lambda: released.append(2))]

		# Act
		dispose_all(disposables)

		# Assert
		assert disposables == []
		assert sorted(released) == [1, 2]
