"""Exceptions raised by docsymbols."""


class DocSymbolsError(Exception):
	"""Base exception for docsymbols errors."""


class ProviderUnavailableError(DocSymbolsError):
	"""Raised when no language provider can serve a request for a document."""

	def __init__(self, feature: str, uri: str | None = None) -> None:
		"""
		Initialize the error.

		Args:
		    feature: The provider feature that was requested (e.g. "documentSymbol").
		    uri: The document the request was made for, if any.
		"""
		self.feature = feature
		self.uri = uri
		msg = f"{feature} provider not found" if uri is None else f"{feature} provider not found for {uri}"
		super().__init__(msg)


class BufferDisposedError(DocSymbolsError):
	"""Raised when a symbols buffer is used after it was disposed."""


class DocumentNotAttachedError(DocSymbolsError):
	"""Raised when a request names a document that has no symbols buffer."""
