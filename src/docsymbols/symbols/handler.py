"""Editor-facing symbol features built on per-document symbol buffers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection, Sequence
from typing import TYPE_CHECKING

from lsprotocol.types import DocumentSymbol, Range, SymbolInformation, WorkspaceSymbol

from docsymbols.config.config_loader import ConfigLoader, get_debounce_delay
from docsymbols.editor import VISUAL_MODES
from docsymbols.errors import DocumentNotAttachedError, ProviderUnavailableError
from docsymbols.provider.base import WorkspaceSymbolProvider
from docsymbols.symbols.buffer import SymbolsBuffer
from docsymbols.symbols.cancellation import CancellationTokenSource
from docsymbols.symbols.events import Disposable, Emitter, Listener, dispose_all
from docsymbols.symbols.query import (
	FunctionInfo,
	find_containing_range,
	get_current_function_info,
	get_current_function_name,
	narrow_to_inner_range,
)

if TYPE_CHECKING:
	from docsymbols.config.config_schema import SymbolsConfigSchema
	from docsymbols.editor import Editor
	from docsymbols.provider.base import SymbolProvider
	from docsymbols.symbols.models import SymbolInfo
	from docsymbols.workspace.document import TextDocument

logger = logging.getLogger(__name__)

SymbolsUpdate = tuple[str, list[DocumentSymbol]]


class SymbolsHandler:
	"""
	Registry of symbols buffers plus the features that query them.

	One SymbolsBuffer is attached per file document. Cursor and selection
	state come from the Editor, symbols from the SymbolProvider.

	"""

	def __init__(self, editor: Editor, provider: SymbolProvider, config: SymbolsConfigSchema | None = None) -> None:
		"""
		Initialize the handler.

		Args:
		    editor: Editor host.
		    provider: Language provider shared by all documents.
		    config: Symbols settings. Defaults to the loaded configuration.
		"""
		self.editor = editor
		self.provider = provider
		self._config = config
		self.buffers: dict[str, SymbolsBuffer] = {}
		self._buffer_disposables: dict[str, list[Disposable]] = {}
		self._on_symbols_update: Emitter[SymbolsUpdate] = Emitter()

	@property
	def config(self) -> SymbolsConfigSchema:
		if self._config is not None:
			return self._config
		return ConfigLoader.get_instance().get.symbols

	@property
	def function_update(self) -> bool:
		return self.config.current_function_auto_update

	@property
	def labels(self) -> dict[str, str]:
		return self.config.kind_labels

	def on_symbols_update(self, listener: Listener[SymbolsUpdate]) -> Disposable:
		"""Subscribe to (uri, symbol tree) updates of every attached buffer."""
		return self._on_symbols_update.event(listener)

	def attach(self, document: TextDocument) -> SymbolsBuffer | None:
		"""
		Create the symbols buffer of a document.

		Args:
		    document: The opened document.

		Returns:
		    The buffer, or None for non-file documents.
		"""
		if not document.is_file:
			return None
		uri = document.uri
		existing = self.buffers.get(uri)
		if existing is not None:
			return existing
		buf = SymbolsBuffer(document, self.provider, debounce_delay=get_debounce_delay(self.config))

		async def forward(symbols: list[DocumentSymbol]) -> None:
			await self._on_symbols_update.fire((uri, symbols))

		self.buffers[uri] = buf
		self._buffer_disposables[uri] = [
			buf.on_did_update(forward),
			document.on_did_change(lambda _doc: self.on_document_change(uri)),
		]
		logger.debug("Attached symbols buffer for %s", uri)
		return buf

	def detach(self, uri: str) -> None:
		buf = self.buffers.pop(uri, None)
		dispose_all(self._buffer_disposables.pop(uri, []))
		if buf is not None:
			buf.dispose()
			logger.debug("Detached symbols buffer for %s", uri)

	def get_buffer(self, uri: str) -> SymbolsBuffer | None:
		return self.buffers.get(uri)

	def _require_buffer(self, uri: str) -> SymbolsBuffer:
		buf = self.buffers.get(uri)
		if buf is None:
			msg = f"Document {uri} is not attached"
			raise DocumentNotAttachedError(msg)
		return buf

	def check_provider(self, document: TextDocument) -> None:
		"""Raise ProviderUnavailableError if document symbols cannot be requested."""
		if not self.provider.has_document_symbol_provider(document):
			raise ProviderUnavailableError("documentSymbol", document.uri)

	async def get_document_symbols(self, uri: str) -> Sequence[SymbolInfo] | None:
		buf = self.buffers.get(uri)
		if buf is None:
			return None
		return await buf.get_symbols()

	async def get_current_function_info(self, uri: str) -> FunctionInfo | tuple[()]:
		"""
		Return (name, start, end) of the innermost symbol at the cursor.

		Returns:
		    The info tuple, or () when the document, provider or a match is missing.
		"""
		buf = self.buffers.get(uri)
		if buf is None or not self.provider.has_document_symbol_provider(buf.document):
			return ()
		position = await self.editor.get_cursor_position(buf.document)
		symbols = await buf.get_symbols()
		if not symbols:
			return ()
		return get_current_function_info(symbols, position)

	async def get_current_function_symbol(self, uri: str) -> str | None:
		"""
		Resolve the decorated name of the function-like symbol at the cursor.

		The name is published to the editor only when current function auto
		update is enabled; it is returned either way.

		Returns:
		    The name, "" when nothing encloses the cursor, or None when the
		    document is not attached or has no provider.
		"""
		buf = self.buffers.get(uri)
		if buf is None or not self.provider.has_document_symbol_provider(buf.document):
			return None
		document = buf.document
		position = await self.editor.get_cursor_position(document)
		symbols = await buf.get_symbols()
		name = get_current_function_name(symbols, position, self.labels) if symbols else ""
		if self.function_update:
			await self.editor.set_current_function(document, name)
		return name

	async def select_symbol_range(
		self,
		uri: str,
		inner: bool,
		visual_mode: str,
		supported_symbols: Collection[str],
	) -> Range | None:
		"""
		Select the range of the symbol enclosing the cursor or current selection.

		Args:
		    uri: Document to operate on.
		    inner: Select only the body, without the first and last lines.
		    visual_mode: The visual mode of the current selection, "" when none.
		    supported_symbols: Accepted symbol kind names.

		Returns:
		    The selected range, or None when nothing was selected.

		Raises:
		    DocumentNotAttachedError: The document has no symbols buffer.
		    ProviderUnavailableError: No document symbol provider for the document.
		"""
		buf = self._require_buffer(uri)
		document = buf.document
		self.check_provider(document)
		if visual_mode:
			rng = await self.editor.get_selected_range(visual_mode, document)
		else:
			pos = await self.editor.get_cursor_position(document)
			rng = Range(start=pos, end=pos)
		symbols = await buf.get_symbols()
		if not symbols:
			await self.editor.show_message("No symbols found", "warning")
			return None
		select_range = find_containing_range(symbols, rng, supported_symbols)
		if inner and select_range is not None:
			select_range = narrow_to_inner_range(select_range, document.getline)
		if select_range is not None:
			await self.editor.select_range(select_range)
		elif visual_mode in VISUAL_MODES:
			await self.editor.restore_visual_selection()
		return select_range

	async def get_workspace_symbols(self, query: str) -> list[SymbolInformation | WorkspaceSymbol]:
		if not isinstance(self.provider, WorkspaceSymbolProvider):
			raise ProviderUnavailableError("workspaceSymbols")
		token_source = CancellationTokenSource()
		return list(await self.provider.fetch_workspace_symbols(query, token_source.token) or [])

	async def resolve_workspace_symbol(
		self, symbol: SymbolInformation | WorkspaceSymbol
	) -> SymbolInformation | WorkspaceSymbol | None:
		"""Return the symbol as is when it has a location uri, otherwise ask the provider to resolve it."""
		location = getattr(symbol, "location", None)
		if location is not None and getattr(location, "uri", None):
			return symbol
		if not isinstance(self.provider, WorkspaceSymbolProvider):
			return symbol
		token_source = CancellationTokenSource()
		return await self.provider.resolve_workspace_symbol(symbol, token_source.token)

	async def on_cursor_hold(self, uri: str) -> None:
		if not self.function_update or uri not in self.buffers:
			return
		await self.get_current_function_symbol(uri)

	def on_insert_enter(self, uri: str) -> None:
		buf = self.buffers.get(uri)
		if buf is not None:
			buf.cancel()

	def on_document_change(self, uri: str) -> None:
		"""Invalidate in-flight work and, for buffers that were read before, schedule a refresh."""
		buf = self.buffers.get(uri)
		if buf is None:
			return
		buf.on_change()
		if not buf.auto_update:
			return
		try:
			asyncio.get_running_loop()
		except RuntimeError:
			logger.debug("No running event loop, not scheduling symbols fetch for %s", uri)
			return
		buf.schedule_fetch()

	def dispose(self) -> None:
		for uri in list(self.buffers):
			self.detach(uri)
		self._on_symbols_update.dispose()
