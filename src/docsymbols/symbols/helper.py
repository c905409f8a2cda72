"""
Normalization of provider symbol results.

Providers answer a document symbol request either with a flat list of
SymbolInformation (each carrying its own container name) or with a tree of
DocumentSymbol nodes. Both shapes are turned into one pre-order list of
SymbolInfo here, so nothing downstream needs to know which one arrived.

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeGuard

from lsprotocol.types import DocumentSymbol, Position, Range, SymbolInformation, SymbolKind

from docsymbols.symbols.models import SymbolInfo

ProviderResult = Sequence[DocumentSymbol] | Sequence[SymbolInformation]


def is_document_symbols(symbols: ProviderResult) -> TypeGuard[Sequence[DocumentSymbol]]:
	"""Whether a provider result is hierarchical. An empty result counts as hierarchical."""
	return len(symbols) == 0 or isinstance(symbols[0], DocumentSymbol)


def get_symbol_kind(kind: SymbolKind | int) -> str:
	"""
	Return the display name of an LSP symbol kind.

	Args:
	    kind: The SymbolKind enum member or its integer value.

	Returns:
	    The kind name (e.g. 'Function'), or 'Unknown' for values outside the protocol.
	"""
	try:
		return SymbolKind(kind).name
	except ValueError:
		return "Unknown"


def compare_positions(a: Position, b: Position) -> int:
	"""Return -1, 0 or 1 comparing two positions in document order."""
	if a.line != b.line:
		return -1 if a.line < b.line else 1
	if a.character != b.character:
		return -1 if a.character < b.character else 1
	return 0


def ordered_range(rng: Range) -> Range:
	"""Return the range with start and end swapped if the provider reversed them."""
	if compare_positions(rng.start, rng.end) > 0:
		return Range(start=rng.end, end=rng.start)
	return rng


def range_sort_key(rng: Range) -> tuple[int, int, int, int]:
	"""Sort key putting earlier starts first, and the wider range first on equal starts."""
	rng = ordered_range(rng)
	return (rng.start.line, rng.start.character, -rng.end.line, -rng.end.character)


def sort_document_symbols(symbols: Sequence[DocumentSymbol]) -> list[DocumentSymbol]:
	return sorted(symbols, key=lambda s: range_sort_key(s.range))


def sort_symbol_informations(symbols: Sequence[SymbolInformation]) -> list[SymbolInformation]:
	return sorted(symbols, key=lambda s: range_sort_key(s.location.range))


def add_document_symbol(res: list[SymbolInfo], symbol: DocumentSymbol, level: int) -> None:
	"""
	Append a symbol and, depth first, its sorted children to res.

	Args:
	    res: Output list, extended in place.
	    symbol: The node to flatten.
	    level: Nesting depth of the node.
	"""
	rng = ordered_range(symbol.range)
	start = rng.start
	res.append(
		SymbolInfo(
			text=symbol.name,
			kind=get_symbol_kind(symbol.kind),
			range=rng,
			lnum=start.line + 1,
			col=start.character + 1,
			level=level,
			selection_range=ordered_range(symbol.selection_range),
		)
	)
	for child in sort_document_symbols(symbol.children or []):
		add_document_symbol(res, child, level + 1)


def symbol_information_to_info(symbol: SymbolInformation) -> SymbolInfo:
	rng = ordered_range(symbol.location.range)
	return SymbolInfo(
		text=symbol.name,
		kind=get_symbol_kind(symbol.kind),
		range=rng,
		lnum=rng.start.line + 1,
		col=rng.start.character + 1,
		level=0,
		container_name=symbol.container_name,
	)


def flatten_symbols(symbols: ProviderResult) -> list[SymbolInfo]:
	"""
	Flatten a provider result into document-ordered SymbolInfo entries.

	Args:
	    symbols: Either DocumentSymbol trees or flat SymbolInformation entries.

	Returns:
	    Pre-order list where every child directly follows its parent.
	"""
	res: list[SymbolInfo] = []
	if is_document_symbols(symbols):
		for symbol in sort_document_symbols(symbols):
			add_document_symbol(res, symbol, 0)
	else:
		res.extend(symbol_information_to_info(s) for s in sort_symbol_informations(symbols))
	return res


def _sorted_tree(symbol: DocumentSymbol) -> DocumentSymbol:
	children = None
	if symbol.children is not None:
		children = [_sorted_tree(child) for child in sort_document_symbols(symbol.children)]
	return DocumentSymbol(
		name=symbol.name,
		kind=symbol.kind,
		range=symbol.range,
		selection_range=symbol.selection_range,
		detail=symbol.detail,
		tags=symbol.tags,
		deprecated=symbol.deprecated,
		children=children,
	)


def to_document_symbol_tree(symbols: ProviderResult) -> list[DocumentSymbol]:
	"""
	Return the hierarchical form of a provider result for update subscribers.

	Flat results become one-level DocumentSymbol nodes whose selection range
	equals their range.
	"""
	if is_document_symbols(symbols):
		return [_sorted_tree(s) for s in sort_document_symbols(symbols)]
	return [
		DocumentSymbol(
			name=s.name,
			kind=s.kind,
			range=s.location.range,
			selection_range=s.location.range,
			detail="",
		)
		for s in sort_symbol_informations(symbols)
	]
