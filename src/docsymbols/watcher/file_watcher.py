"""File watcher that reloads file-backed documents when they change on disk."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import anyio
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from docsymbols.workspace.document import TextDocument

logger = logging.getLogger(__name__)


def _event_path(path: str | bytes) -> Path:
	path_str = path.decode() if isinstance(path, bytes) else str(path)
	return Path(path_str).resolve()


class DocumentChangeHandler(FileSystemEventHandler):
	"""Maps file system events to reloads of the matching documents."""

	def __init__(
		self,
		documents: dict[Path, TextDocument],
		loop: asyncio.AbstractEventLoop,
		on_change: Callable[[TextDocument], None] | None = None,
	) -> None:
		"""
		Initialize the handler.

		Args:
		    documents: Watched documents keyed by resolved file path.
		    loop: Event loop owning the documents; reloads are run on it.
		    on_change: Called on the loop after a reload changed a document.
		"""
		super().__init__()
		self.documents = documents
		self.loop = loop
		self.on_change = on_change

	def _schedule_reload(self, path: str | bytes) -> None:
		"""Queue a reload on the event loop, since watchdog calls in from its observer thread."""
		document = self.documents.get(_event_path(path))
		if document is None:
			return
		logger.debug(f"Scheduling reload of {document.uri}")
		self.loop.call_soon_threadsafe(self._reload, document)

	def _reload(self, document: TextDocument) -> None:
		try:
			changed = document.reload()
		except OSError:
			logger.exception("Error reloading %s", document.uri)
			return
		if changed:
			logger.info(f"Reloaded {document.uri} at version {document.version}")
			if self.on_change:
				self.on_change(document)

	def on_modified(self, event: FileSystemEvent) -> None:
		if event.is_directory:
			return
		self._schedule_reload(event.src_path)

	def on_created(self, event: FileSystemEvent) -> None:
		if event.is_directory:
			return
		self._schedule_reload(event.src_path)

	def on_moved(self, event: FileSystemEvent) -> None:
		# Editors often save by writing a temporary file and renaming it over the original
		if event.is_directory:
			return
		self._schedule_reload(event.dest_path)


class DocumentWatcher:
	"""Watches the files behind a set of documents."""

	def __init__(
		self,
		documents: Iterable[TextDocument],
		on_change: Callable[[TextDocument], None] | None = None,
	) -> None:
		"""
		Initialize the watcher.

		Args:
		    documents: File-backed documents to keep in sync with disk.
		    on_change: Called after a document was reloaded with new content.
		"""
		self.observer = Observer()
		self.documents: dict[Path, TextDocument] = {}
		self.on_change = on_change
		self.event_handler: DocumentChangeHandler | None = None
		for document in documents:
			self.add(document)
		self._stop_event: anyio.Event | None = None

	def add(self, document: TextDocument) -> None:
		if document.path is None:
			msg = f"Document {document.uri} is not backed by a file"
			raise ValueError(msg)
		path = document.path.resolve()
		if not path.parent.is_dir():
			msg = f"Path does not exist: {path.parent}"
			raise ValueError(msg)
		self.documents[path] = document

	@property
	def directories(self) -> set[Path]:
		return {path.parent for path in self.documents}

	async def start(self) -> None:
		"""Start watching and wait until ``stop`` is called."""
		self._stop_event = anyio.Event()
		self.event_handler = DocumentChangeHandler(self.documents, asyncio.get_running_loop(), self.on_change)
		for directory in self.directories:
			self.observer.schedule(self.event_handler, str(directory), recursive=False)
		self.observer.start()
		logger.info(f"Started watching {len(self.documents)} documents")
		try:
			await self._stop_event.wait()
		finally:
			self.stop()

	def stop(self) -> None:
		"""Stop watching."""
		if self.observer.is_alive():
			self.observer.stop()
			self.observer.join()
			logger.info("Watchdog observer stopped.")
		if self._stop_event is not None:
			self._stop_event.set()
