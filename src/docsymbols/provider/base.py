"""Interface of the language provider the symbols cache queries."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from lsprotocol.types import DocumentSymbol, SymbolInformation, WorkspaceSymbol

if TYPE_CHECKING:
	from docsymbols.symbols.cancellation import CancellationToken
	from docsymbols.workspace.document import TextDocument

DocumentSymbolResult = Sequence[DocumentSymbol] | Sequence[SymbolInformation] | None
WorkspaceSymbolResult = Sequence[SymbolInformation] | Sequence[WorkspaceSymbol] | None


@runtime_checkable
class SymbolProvider(Protocol):
	"""A source of document symbols, usually a language server."""

	def has_document_symbol_provider(self, document: TextDocument) -> bool:
		"""Whether document symbols can be requested for the document."""
		...

	async def fetch_document_symbols(self, document: TextDocument, token: CancellationToken) -> DocumentSymbolResult:
		"""
		Request the symbols of a document.

		Implementations should return None once the token is cancelled.
		"""
		...


@runtime_checkable
class WorkspaceSymbolProvider(Protocol):
	"""Optional provider capability for project-wide symbol search."""

	async def fetch_workspace_symbols(self, query: str, token: CancellationToken) -> WorkspaceSymbolResult: ...

	async def resolve_workspace_symbol(
		self, symbol: SymbolInformation | WorkspaceSymbol, token: CancellationToken
	) -> SymbolInformation | WorkspaceSymbol | None: ...
