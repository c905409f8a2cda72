"""
Per-document symbol cache.

A SymbolsBuffer owns the outline of one document. It memoizes the last
provider answer by document version, coalesces bursts of edits into one
debounced background fetch, and makes sure only one provider request is
outstanding at a time: starting a fetch, editing the document or calling
``cancel`` revokes the previous request's token, so a late answer for an
older version is never committed.

"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection, Sequence
from typing import TYPE_CHECKING

from lsprotocol.types import DocumentSymbol, Position, Range

from docsymbols.config.config_loader import get_debounce_delay
from docsymbols.errors import BufferDisposedError
from docsymbols.symbols.cancellation import CancellationTokenSource
from docsymbols.symbols.events import Disposable, Emitter, Listener
from docsymbols.symbols.helper import flatten_symbols, to_document_symbol_tree
from docsymbols.symbols.query import find_innermost_symbol

if TYPE_CHECKING:
	from docsymbols.provider.base import SymbolProvider
	from docsymbols.symbols.models import SymbolInfo
	from docsymbols.workspace.document import TextDocument

logger = logging.getLogger(__name__)


class SymbolsBuffer:
	"""Symbol cache and refresh scheduler for a single document."""

	def __init__(
		self,
		document: TextDocument,
		provider: SymbolProvider,
		debounce_delay: float | None = None,
	) -> None:
		"""
		Initialize the buffer.

		Args:
		    document: The document whose outline is cached.
		    provider: Source of document symbols.
		    debounce_delay: Quiescence window in seconds for ``schedule_fetch``.
		        Defaults to the configured delay.
		"""
		self.document = document
		self.provider = provider
		self.debounce_delay = get_debounce_delay() if debounce_delay is None else debounce_delay
		self.auto_update = False
		self._version: int | None = None
		self._symbols: tuple[SymbolInfo, ...] = ()
		self._token_source: CancellationTokenSource | None = None
		self._debounce_task: asyncio.Task[None] | None = None
		self._on_did_update: Emitter[list[DocumentSymbol]] = Emitter()
		self._disposed = False

	@property
	def uri(self) -> str:
		return self.document.uri

	@property
	def version(self) -> int | None:
		"""Document version of the committed snapshot, None before the first commit."""
		return self._version

	@property
	def symbols(self) -> tuple[SymbolInfo, ...]:
		"""The committed snapshot, possibly stale."""
		return self._symbols

	@property
	def disposed(self) -> bool:
		return self._disposed

	@property
	def fetch_scheduled(self) -> bool:
		return self._debounce_task is not None and not self._debounce_task.done()

	@property
	def fetch_in_flight(self) -> bool:
		return self._token_source is not None

	def on_did_update(self, listener: Listener[list[DocumentSymbol]]) -> Disposable:
		"""
		Subscribe to committed updates.

		Listeners receive the hierarchical form of each committed result.

		Returns:
		    Disposable removing the listener.
		"""
		self._check_disposed()
		return self._on_did_update.event(listener)

	def _check_disposed(self) -> None:
		if self._disposed:
			msg = f"Symbols buffer for {self.uri} is disposed"
			raise BufferDisposedError(msg)

	async def get_symbols(self) -> Sequence[SymbolInfo]:
		"""
		Return symbols for the current document version.

		Flushes pending document text first. The cached snapshot is returned
		as is when its version is current; otherwise a fetch is forced and
		awaited. A failed or cancelled fetch leaves the previous snapshot in
		place, and that snapshot is returned.

		Returns:
		    The snapshot, in pre-order.
		"""
		self._check_disposed()
		self.document.force_sync()
		self.auto_update = True
		if self.document.version == self._version:
			return self._symbols
		self.cancel()
		try:
			await self._fetch_symbols()
		except Exception:
			logger.exception("Error fetching document symbols for %s", self.uri)
		return self._symbols

	request_symbols = get_symbols

	def resolve_innermost(self, target: Position | Range, kinds: Collection[str] | None = None) -> SymbolInfo | None:
		"""Find the innermost symbol of the committed snapshot containing target."""
		return find_innermost_symbol(self._symbols, target, kinds)

	def on_change(self) -> None:
		"""Drop scheduled and in-flight work after a document edit."""
		if self._disposed:
			return
		self.cancel()

	def schedule_fetch(self) -> None:
		"""
		Fetch in the background once edits have been quiet for the debounce window.

		Each call restarts the window. Must be called from a running event loop.
		"""
		self._check_disposed()
		self._clear_debounce()
		logger.debug("Scheduling symbols fetch for %s in %ss", self.uri, self.debounce_delay)
		self._debounce_task = asyncio.create_task(self._debounced_fetch())

	async def _debounced_fetch(self) -> None:
		try:
			await asyncio.sleep(self.debounce_delay)
			await self._fetch_symbols()
		except asyncio.CancelledError:
			logger.debug("Symbols fetch for %s cancelled", self.uri)
		except Exception:
			logger.exception("Error fetching document symbols for %s", self.uri)
		finally:
			if self._debounce_task is asyncio.current_task():
				self._debounce_task = None

	async def _fetch_symbols(self) -> None:
		if self._disposed:
			return
		version = self.document.version
		if version == self._version:
			return
		if self._token_source is not None:
			self._token_source.cancel()
		token_source = self._token_source = CancellationTokenSource()
		token = token_source.token
		try:
			result = await self.provider.fetch_document_symbols(self.document, token)
		finally:
			if self._token_source is token_source:
				self._token_source = None
		if result is None or token.is_cancellation_requested or self._disposed:
			logger.debug("Discarding symbols of %s for version %s", self.uri, version)
			return
		if self._version is not None and version < self._version:
			return
		self._version = version
		self._symbols = tuple(flatten_symbols(result))
		logger.debug("Committed %d symbols of %s for version %s", len(self._symbols), self.uri, version)
		await self._on_did_update.fire(to_document_symbol_tree(result))

	def _clear_debounce(self) -> None:
		if self._debounce_task is not None:
			if not self._debounce_task.done():
				self._debounce_task.cancel()
			self._debounce_task = None

	def cancel(self) -> None:
		"""Cancel the pending debounced fetch and the in-flight request, if any."""
		self._clear_debounce()
		if self._token_source is not None:
			self._token_source.cancel()
			self._token_source = None

	def dispose(self) -> None:
		"""Cancel all work and release the snapshot and update listeners."""
		if self._disposed:
			return
		self.cancel()
		self._disposed = True
		self._symbols = ()
		self._on_did_update.dispose()
