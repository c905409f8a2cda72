"""Documents tracked by docsymbols."""

from docsymbols.workspace.document import TextDocument

__all__ = ["TextDocument"]
