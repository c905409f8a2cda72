"""Tests for in-memory text documents."""

from pathlib import Path

import pytest

from docsymbols.workspace.document import TextDocument


@pytest.mark.unit
class TestTextDocument:
	"""Versioned document content."""

	def test_apply_change_bumps_version_and_notifies(self) -> None:
		"""Test that each change bumps the version and reaches subscribed listeners."""
		# Arrange
		document = TextDocument("file:///a.py", text="a", version=3)
		seen = []
		subscription = document.on_did_change(lambda doc: seen.append(doc.version))

		# Act
		document.apply_change("b")
		subscription.dispose()
		document.apply_change("c")

		# Assert
		assert document.version == 5
		assert document.text == "c"
		assert seen == [4]

	def test_queued_change_waits_for_sync(self) -> None:
		"""Test that queued text applies on the first sync only."""
		# Arrange
		document = TextDocument("file:///a.py", text="a")
		document.queue_change("ab")
		assert document.has_pending_changes
		assert document.version == 0

		# Act
		document.force_sync()

		# Assert
		assert document.text == "ab"
		assert document.version == 1
		document.force_sync()
		assert document.version == 1

	def test_getline(self) -> None:
		"""Test that out-of-range lines read as empty."""
		# Arrange
		document = TextDocument("file:///a.py", text="one\ntwo")

		# Act / Assert
		assert document.getline(1) == "two"
		assert document.getline(5) == ""
		assert document.getline(-1) == ""

	def test_reload_from_file(self, tmp_path: Path) -> None:
		"""Test that reloading only bumps the version when the file content changed."""
		# Arrange
		source = tmp_path / "mod.py"
		source.write_text("x = 1\n")
		document = TextDocument.from_file(source, language_id="python")

		# Act / Assert
		assert document.uri == source.resolve().as_uri()
		assert document.reload() is False
		source.write_text("x = 2\n")
		assert document.reload() is True
		assert document.text == "x = 2\n"
		assert document.version == 1

	def test_reload_without_file(self) -> None:
		"""Test that a document without a file cannot reload."""
		with pytest.raises(ValueError, match="not backed by a file"):
			TextDocument("untitled:1").reload()

	def test_buftype(self) -> None:
		"""Test that only documents without a special buftype count as files."""
		assert TextDocument("file:///a.py").is_file
		assert not TextDocument("term://1", buftype="terminal").is_file
