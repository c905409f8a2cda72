"""Data models for flattened document symbols."""

from __future__ import annotations

from dataclasses import dataclass

from lsprotocol.types import Range

CALLBACK_SUFFIX = ") callback"
"""Display suffix some providers give anonymous callback arguments reported as functions."""

FUNCTION_KINDS = frozenset({"Class", "Method", "Function", "Struct"})
"""Symbol kinds considered by the current function lookup."""


@dataclass(frozen=True)
class SymbolInfo:
	"""A symbol from the document outline, flattened for positional queries."""

	text: str
	"""Display name of the symbol."""

	kind: str
	"""Symbol kind name, e.g. 'Class', 'Method', 'Function'."""

	range: Range
	"""Range spanned by the symbol body."""

	lnum: int
	"""1-based line of range.start."""

	col: int
	"""1-based column of range.start."""

	level: int = 0
	"""Nesting depth, 0 for top-level symbols."""

	selection_range: Range | None = None
	"""Range of the symbol identifier, only for hierarchical results."""

	container_name: str | None = None
	"""Name of the enclosing scope, only for flat results."""

	@property
	def is_callback(self) -> bool:
		"""Whether this entry is an anonymous callback pseudo-function."""
		return self.text.endswith(CALLBACK_SUFFIX)
