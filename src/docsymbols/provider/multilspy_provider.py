"""Document symbol provider backed by a MultiLSPy language server."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lsprotocol.types import DocumentSymbol, Location, Position, Range, SymbolInformation, SymbolKind
from multilspy import LanguageServer, multilspy_types
from multilspy.multilspy_config import MultilspyConfig
from multilspy.multilspy_logger import MultilspyLogger

if TYPE_CHECKING:
	from docsymbols.provider.base import DocumentSymbolResult
	from docsymbols.symbols.cancellation import CancellationToken
	from docsymbols.workspace.document import TextDocument

logger = logging.getLogger(__name__)

# Map document language ids to MultiLSPy language names
LANGUAGE_MAP = {
	"python": "python",
	"javascript": "javascript",
	"typescript": "typescript",
	"java": "java",
	"csharp": "csharp",
	"go": "go",
	"rust": "rust",
	"ruby": "ruby",
	"php": "php",
	"cpp": "cpp",
	"c": "cpp",
}


def _position_from_dict(data: dict[str, Any]) -> Position:
	return Position(line=int(data.get("line", 0)), character=int(data.get("character", 0)))


def _range_from_dict(data: dict[str, Any]) -> Range:
	return Range(start=_position_from_dict(data.get("start", {})), end=_position_from_dict(data.get("end", {})))


def _kind_from_value(value: Any) -> SymbolKind:
	try:
		return SymbolKind(int(value))
	except (TypeError, ValueError):
		return SymbolKind.Variable


def document_symbol_from_dict(data: dict[str, Any]) -> DocumentSymbol:
	"""Convert a DocumentSymbol-shaped response item into an lsprotocol object."""
	rng = _range_from_dict(data.get("range", {}))
	selection = data.get("selectionRange")
	children = data.get("children")
	return DocumentSymbol(
		name=str(data.get("name", "")),
		kind=_kind_from_value(data.get("kind")),
		range=rng,
		selection_range=_range_from_dict(selection) if isinstance(selection, dict) else rng,
		detail=data.get("detail"),
		children=[document_symbol_from_dict(c) for c in children if isinstance(c, dict)]
		if isinstance(children, list)
		else None,
	)


def symbol_information_from_dict(data: dict[str, Any]) -> SymbolInformation:
	"""Convert a SymbolInformation-shaped response item into an lsprotocol object."""
	location = data.get("location", {})
	return SymbolInformation(
		name=str(data.get("name", "")),
		kind=_kind_from_value(data.get("kind")),
		location=Location(uri=str(location.get("uri", "")), range=_range_from_dict(location.get("range", {}))),
		container_name=data.get("containerName"),
	)


def _range_key(rng: Range) -> tuple[tuple[int, int], tuple[int, int]]:
	return (rng.start.line, rng.start.character), (rng.end.line, rng.end.character)


def _encloses(outer: Range, inner: Range) -> bool:
	outer_start, outer_end = _range_key(outer)
	inner_start, inner_end = _range_key(inner)
	return outer_start <= inner_start and inner_end <= outer_end


def rebuild_hierarchy(symbols: list[DocumentSymbol]) -> list[DocumentSymbol]:
	"""
	Nest pre-order flattened symbols under their enclosing symbols.

	Each symbol becomes a child of the nearest preceding symbol whose range
	encloses it; symbols with no enclosing predecessor are roots.

	Args:
	    symbols: Childless symbols in pre-order.

	Returns:
	    The root symbols with children attached.
	"""
	roots: list[DocumentSymbol] = []
	stack: list[DocumentSymbol] = []
	for symbol in symbols:
		while stack and not _encloses(stack[-1].range, symbol.range):
			stack.pop()
		if stack:
			parent = stack[-1]
			if parent.children is None:
				parent.children = []
			parent.children.append(symbol)
		else:
			roots.append(symbol)
		stack.append(symbol)
	return roots


def convert_symbols(response: Any) -> DocumentSymbolResult:
	"""
	Convert a MultiLSPy document symbol response into lsprotocol symbols.

	MultiLSPy answers with a ``(symbols, tree)`` tuple whose symbols list is
	the DocumentSymbol tree flattened in pre-order without children, so the
	hierarchy is rebuilt from range containment. A plain list is taken as a
	raw LSP response and keeps its own children.

	Args:
	    response: The raw response.

	Returns:
	    DocumentSymbol or SymbolInformation objects, or None if the response has no symbols list.
	"""
	flattened = isinstance(response, tuple)
	if flattened:
		response = response[0] if response else None
	if not isinstance(response, list):
		return None
	items = [item for item in response if isinstance(item, dict) and "name" in item]
	if items and "location" in items[0]:
		return [symbol_information_from_dict(item) for item in items if "location" in item]
	if not flattened:
		return [document_symbol_from_dict(item) for item in items if "range" in item]
	symbols = [document_symbol_from_dict({**item, "children": None}) for item in items if "range" in item]
	return rebuild_hierarchy(symbols)


class MultilspyProvider:
	"""
	SymbolProvider over a started MultiLSPy LanguageServer.

	The server opens files from disk, so only file-backed documents inside
	the project root are served; their in-memory text is pushed to the
	server before each request.

	"""

	def __init__(self, server: LanguageServer, project_root: Path, language_ids: set[str] | None = None) -> None:
		"""
		Initialize the provider.

		Args:
		    server: A language server whose ``start_server`` context is active.
		    project_root: Repository root the server was created for.
		    language_ids: Document languages the server handles. None accepts any.
		"""
		self.server = server
		self.project_root = Path(project_root).resolve()
		self.language_ids = language_ids

	def _normalize_path(self, file_path: Path) -> str:
		"""
		Convert an absolute path to a project-relative path for LSP.

		Args:
		    file_path: The absolute file path.

		Returns:
		    A project-relative path string.
		"""
		try:
			return str(file_path.resolve().relative_to(self.project_root))
		except ValueError:
			return str(file_path)

	def has_document_symbol_provider(self, document: TextDocument) -> bool:
		if document.path is None:
			return False
		if self.language_ids is not None and document.language_id not in self.language_ids:
			return False
		return document.path.resolve().is_relative_to(self.project_root)

	def _push_text(self, relative_path: str, text: str) -> None:
		"""
		Replace the server's copy of an open file with the document text.

		The server opens files from disk, so unsaved edits are sent as a
		delete of the whole file followed by an insert of the new content.

		Args:
		    relative_path: Project-relative path of a file opened on the server.
		    text: The document's current content.
		"""
		server_text = self.server.get_open_file_text(relative_path)
		if server_text == text:
			return
		lines = server_text.split("\n")
		if server_text:
			self.server.delete_text_between_positions(
				relative_path,
				multilspy_types.Position(line=0, character=0),
				multilspy_types.Position(line=len(lines) - 1, character=len(lines[-1])),
			)
		if text:
			self.server.insert_text_at_position(relative_path, 0, 0, text)
		logger.debug("Sent in-memory content of %s to the language server", relative_path)

	async def fetch_document_symbols(self, document: TextDocument, token: CancellationToken) -> DocumentSymbolResult:
		"""
		Request document symbols for the document's current text.

		The file stays open on the server for the duration of the request, and
		the request is abandoned when the token fires.

		Args:
		    document: A file-backed document under the project root.
		    token: Cancellation token of this fetch.

		Returns:
		    The converted symbols, or None if cancelled.
		"""
		if token.is_cancellation_requested or document.path is None:
			return None
		relative_path = self._normalize_path(document.path)
		with self.server.open_file(relative_path):
			self._push_text(relative_path, document.text)
			request = asyncio.ensure_future(self.server.request_document_symbols(relative_path))
			remove = token.on_cancellation_requested(request.cancel)
			try:
				response = await request
			except asyncio.CancelledError:
				if token.is_cancellation_requested:
					logger.debug("Document symbol request for %s cancelled", relative_path)
					return None
				raise
			finally:
				remove()
		if token.is_cancellation_requested:
			return None
		return convert_symbols(response)


def create_language_server(project_root: Path, language_id: str) -> LanguageServer | None:
	"""
	Create a MultiLSPy language server for a document language.

	The caller starts it with ``async with server.start_server()`` before
	handing it to MultilspyProvider.

	Args:
	    project_root: The root directory of the project being analyzed.
	    language_id: Document language id, e.g. "python".

	Returns:
	    A language server instance or None if the language is not supported.
	"""
	multilspy_language = LANGUAGE_MAP.get(language_id.lower())
	if not multilspy_language:
		logger.warning("Document symbols not supported for language: %s", language_id)
		return None

	try:
		config = MultilspyConfig.from_dict({"code_language": multilspy_language})
		return LanguageServer.create(config, MultilspyLogger(), str(Path(project_root).resolve()))
	except Exception:
		logger.exception("Failed to initialize language server for %s", language_id)
		return None
