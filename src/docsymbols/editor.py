"""Interface of the editor host driving the symbols handler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
	from lsprotocol.types import Position, Range

	from docsymbols.workspace.document import TextDocument

MessageLevel = Literal["error", "warning", "more"]

VISUAL_MODES = frozenset({"v", "V", "\x16"})
"""Characterwise, linewise and blockwise visual modes."""


class Editor(Protocol):
	"""Cursor, selection and status operations the handler needs from the editor."""

	async def get_cursor_position(self, document: TextDocument) -> Position: ...

	async def get_selected_range(self, visual_mode: str, document: TextDocument) -> Range: ...

	async def select_range(self, rng: Range) -> None: ...

	async def restore_visual_selection(self) -> None: ...

	async def set_current_function(self, document: TextDocument, name: str) -> None:
		"""Publish the current function name for the status line."""
		...

	async def show_message(self, message: str, level: MessageLevel = "more") -> None: ...
