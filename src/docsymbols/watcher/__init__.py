"""File watching for file-backed documents."""

from docsymbols.watcher.file_watcher import DocumentChangeHandler, DocumentWatcher

__all__ = ["DocumentChangeHandler", "DocumentWatcher"]
