"""Language providers for document symbols."""

from docsymbols.provider.base import SymbolProvider, WorkspaceSymbolProvider
from docsymbols.provider.multilspy_provider import MultilspyProvider, create_language_server

__all__ = ["MultilspyProvider", "SymbolProvider", "WorkspaceSymbolProvider", "create_language_server"]
