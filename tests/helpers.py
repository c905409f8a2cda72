"""Shared builders and fakes for docsymbols tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from lsprotocol.types import DocumentSymbol, Location, Position, Range, SymbolInformation, SymbolKind

from docsymbols.symbols.models import SymbolInfo
from docsymbols.workspace.document import TextDocument


def make_range(start_line: int, start_char: int, end_line: int, end_char: int) -> Range:
	return Range(start=Position(line=start_line, character=start_char), end=Position(line=end_line, character=end_char))


def make_document_symbol(
	name: str,
	kind: SymbolKind,
	rng: Range,
	children: list[DocumentSymbol] | None = None,
) -> DocumentSymbol:
	return DocumentSymbol(name=name, kind=kind, range=rng, selection_range=rng, children=children)


def make_symbol_information(
	name: str, kind: SymbolKind, rng: Range, container_name: str | None = None
) -> SymbolInformation:
	return SymbolInformation(
		name=name,
		kind=kind,
		location=Location(uri="file:///test.py", range=rng),
		container_name=container_name,
	)


def make_symbol_info(text: str, kind: str, rng: Range, level: int = 0) -> SymbolInfo:
	return SymbolInfo(
		text=text,
		kind=kind,
		range=rng,
		lnum=rng.start.line + 1,
		col=rng.start.character + 1,
		level=level,
	)


def make_document(text: str = "", uri: str = "file:///test.py", buftype: str = "") -> TextDocument:
	return TextDocument(uri, text=text, language_id="python", version=1, buftype=buftype)


async def wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
	"""Yield to the event loop until predicate holds."""

	async def poll() -> None:
		while not predicate():
			await asyncio.sleep(0.001)

	await asyncio.wait_for(poll(), timeout)


class FakeProvider:
	"""SymbolProvider returning canned results, with optional per-version gates."""

	def __init__(self, result: Any = None) -> None:
		self.result = result
		self.available = True
		self.error: Exception | None = None
		self.gates: dict[int, asyncio.Event] = {}
		self.calls: list[tuple[int, Any]] = []

	def has_document_symbol_provider(self, document: TextDocument) -> bool:
		return self.available

	async def fetch_document_symbols(self, document: TextDocument, token: Any) -> Any:
		version = document.version
		self.calls.append((version, token))
		gate = self.gates.get(version)
		if gate is not None:
			await gate.wait()
		if self.error is not None:
			raise self.error
		if callable(self.result):
			return self.result(version)
		return self.result


class FakeEditor:
	"""Editor recording what the handler asks of it."""

	def __init__(self, position: Position | None = None) -> None:
		self.position = position or Position(line=0, character=0)
		self.selected_range: Range | None = None
		self.selections: list[Range] = []
		self.restored = 0
		self.current_function: list[tuple[str, str]] = []
		self.messages: list[tuple[str, str]] = []

	async def get_cursor_position(self, document: TextDocument) -> Position:
		return self.position

	async def get_selected_range(self, visual_mode: str, document: TextDocument) -> Range:
		assert self.selected_range is not None
		return self.selected_range

	async def select_range(self, rng: Range) -> None:
		self.selections.append(rng)

	async def restore_visual_selection(self) -> None:
		self.restored += 1

	async def set_current_function(self, document: TextDocument, name: str) -> None:
		self.current_function.append((document.uri, name))

	async def show_message(self, message: str, level: str = "more") -> None:
		self.messages.append((message, level))
