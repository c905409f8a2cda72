"""Document symbol cache and positional symbol queries."""

from docsymbols.symbols.buffer import SymbolsBuffer
from docsymbols.symbols.handler import SymbolsHandler
from docsymbols.symbols.models import SymbolInfo

__all__ = ["SymbolInfo", "SymbolsBuffer", "SymbolsHandler"]
