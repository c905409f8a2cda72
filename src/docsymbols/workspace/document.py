"""In-memory text documents with monotonic versions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from docsymbols.symbols.events import Disposable

logger = logging.getLogger(__name__)

ChangeListener = Callable[["TextDocument"], None]


class TextDocument:
	"""
	A text document as seen by the symbols cache.

	The version increases by one on every applied change. Changes can also
	be queued (as an editor does while the user types) and are only applied
	on ``force_sync``.

	"""

	def __init__(
		self,
		uri: str,
		text: str = "",
		language_id: str = "",
		version: int = 0,
		buftype: str = "",
		path: Path | None = None,
	) -> None:
		"""
		Initialize the document.

		Args:
		    uri: Document URI.
		    text: Initial content.
		    language_id: Language identifier, e.g. "python".
		    version: Initial version.
		    buftype: Buffer type; non-empty for special non-file buffers.
		    path: File backing the document, if any.
		"""
		self.uri = uri
		self.language_id = language_id
		self.buftype = buftype
		self.path = path
		self._text = text
		self._version = version
		self._pending: str | None = None
		self._listeners: list[ChangeListener] = []

	@classmethod
	def from_file(cls, path: str | Path, language_id: str = "") -> TextDocument:
		"""Create a document holding the current content of a file."""
		file_path = Path(path).resolve()
		text = file_path.read_text(encoding="utf-8")
		return cls(file_path.as_uri(), text=text, language_id=language_id, path=file_path)

	@property
	def version(self) -> int:
		return self._version

	@property
	def text(self) -> str:
		return self._text

	@property
	def lines(self) -> list[str]:
		return self._text.split("\n")

	@property
	def is_file(self) -> bool:
		return self.buftype == ""

	@property
	def has_pending_changes(self) -> bool:
		return self._pending is not None

	def getline(self, line: int) -> str:
		"""Return the 0-based line, or "" when out of range."""
		lines = self.lines
		if 0 <= line < len(lines):
			return lines[line]
		return ""

	def on_did_change(self, listener: ChangeListener) -> Disposable:
		"""Subscribe to applied changes."""
		self._listeners.append(listener)

		def remove() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return Disposable(remove)

	def apply_change(self, text: str) -> None:
		"""Replace the content, bump the version and notify listeners."""
		self._pending = None
		self._text = text
		self._version += 1
		logger.debug("Document %s changed to version %s", self.uri, self._version)
		for listener in list(self._listeners):
			listener(self)

	def queue_change(self, text: str) -> None:
		"""Record new content without applying it until the next sync."""
		self._pending = text

	def force_sync(self) -> None:
		"""Apply queued content, if any."""
		if self._pending is not None:
			self.apply_change(self._pending)

	def reload(self) -> bool:
		"""
		Re-read the backing file.

		Returns:
		    True if the content differed and a change was applied.
		"""
		if self.path is None:
			msg = f"Document {self.uri} is not backed by a file"
			raise ValueError(msg)
		text = self.path.read_text(encoding="utf-8")
		if text == self._text and self._pending is None:
			return False
		self.apply_change(text)
		return True
