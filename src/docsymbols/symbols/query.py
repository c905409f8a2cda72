"""
Positional queries over a flattened symbol snapshot.

All lookups rely on the snapshot being in pre-order (children right after
their parent, see ``helper.flatten_symbols``): scanning it backwards, the
first symbol that contains the target is the innermost one.

"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence

from lsprotocol.types import Position, Range

from docsymbols.symbols.helper import compare_positions
from docsymbols.symbols.models import FUNCTION_KINDS, SymbolInfo

_LEADING_WHITESPACE = re.compile(r"^\s*")

FunctionInfo = tuple[str, Position, Position]


def position_in_range(position: Position, rng: Range) -> int:
	"""
	Locate a position relative to a range.

	Returns:
	    -1 if before the range, 1 if after it, 0 if inside (both ends inclusive).
	"""
	if compare_positions(position, rng.start) < 0:
		return -1
	if compare_positions(position, rng.end) > 0:
		return 1
	return 0


def range_in_range(inner: Range, outer: Range) -> bool:
	"""Whether inner lies within outer, bounds included."""
	return compare_positions(inner.start, outer.start) >= 0 and compare_positions(inner.end, outer.end) <= 0


def ranges_equal(a: Range, b: Range) -> bool:
	return compare_positions(a.start, b.start) == 0 and compare_positions(a.end, b.end) == 0


def _contains(rng: Range, target: Position | Range) -> bool:
	if isinstance(target, Range):
		return range_in_range(target, rng)
	return position_in_range(target, rng) == 0


def _filter_kinds(symbols: Iterable[SymbolInfo], kinds: Collection[str] | None) -> list[SymbolInfo]:
	if kinds is None:
		return list(symbols)
	return [s for s in symbols if s.kind in kinds]


def find_innermost_symbol(
	symbols: Sequence[SymbolInfo],
	target: Position | Range,
	kinds: Collection[str] | None = None,
) -> SymbolInfo | None:
	"""
	Find the most deeply nested symbol containing a position or range.

	Args:
	    symbols: Snapshot in pre-order.
	    target: Cursor position or range to locate.
	    kinds: Optional set of accepted kind names.

	Returns:
	    The innermost matching symbol, or None. Callback pseudo-functions are skipped.
	"""
	for symbol in reversed(_filter_kinds(symbols, kinds)):
		if symbol.is_callback:
			continue
		if _contains(symbol.range, target):
			return symbol
	return None


def get_current_function_info(symbols: Sequence[SymbolInfo], position: Position) -> FunctionInfo | tuple[()]:
	"""Return (name, start, end) of the innermost symbol at position, or an empty tuple."""
	symbol = find_innermost_symbol(symbols, position)
	if symbol is None:
		return ()
	return (symbol.text, symbol.range.start, symbol.range.end)


def decorate_symbol_name(symbol: SymbolInfo, labels: Mapping[str, str]) -> str:
	"""Prefix the symbol name with the label configured for its kind, if any."""
	label = labels.get(symbol.kind.lower())
	if label:
		return f"{label} {symbol.text}"
	return symbol.text


def get_current_function_name(
	symbols: Sequence[SymbolInfo],
	position: Position,
	labels: Mapping[str, str] | None = None,
) -> str:
	"""
	Return the decorated name of the function-like symbol enclosing position.

	Only Class, Method, Function and Struct symbols are considered.

	Args:
	    symbols: Snapshot in pre-order.
	    position: Cursor position.
	    labels: Display labels keyed by lower-cased kind name.

	Returns:
	    The name, prefixed with its kind label when one is configured, or "" if none matches.
	"""
	symbol = find_innermost_symbol(symbols, position, FUNCTION_KINDS)
	if symbol is None:
		return ""
	return decorate_symbol_name(symbol, labels or {})


def find_containing_range(
	symbols: Sequence[SymbolInfo],
	rng: Range,
	kinds: Collection[str],
) -> Range | None:
	"""
	Find the range of the innermost symbol that encloses rng without being equal to it.

	Calling this again with the returned range walks outward to the next
	enclosing symbol.

	Args:
	    symbols: Snapshot in pre-order.
	    rng: The current selection, or an empty range at the cursor.
	    kinds: Accepted kind names.

	Returns:
	    The enclosing symbol range, or None at the outermost level.
	"""
	for symbol in reversed(_filter_kinds(symbols, kinds)):
		if symbol.is_callback:
			continue
		if not ranges_equal(symbol.range, rng) and range_in_range(rng, symbol.range):
			return symbol.range
	return None


def narrow_to_inner_range(rng: Range, getline: Callable[[int], str]) -> Range:
	"""
	Shrink a symbol range to its body, dropping the first and last lines.

	Args:
	    rng: The symbol range.
	    getline: Returns the text of a 0-based line.

	Returns:
	    Range from the first non-blank column of line start+1 to the end of line end-1.
	    Symbols without a body line between their first and last line keep their range.
	"""
	if rng.end.line - rng.start.line < 2:
		return rng
	start_line = rng.start.line + 1
	end_line = rng.end.line - 1
	first = getline(start_line)
	last = getline(end_line)
	indent = _LEADING_WHITESPACE.match(first)
	return Range(
		start=Position(line=start_line, character=len(indent.group(0)) if indent else 0),
		end=Position(line=end_line, character=len(last)),
	)
