"""Global test fixtures and configuration."""

from collections.abc import Generator

import pytest
from lsprotocol.types import SymbolKind

from docsymbols.config.config_loader import TEST_MODE_ENV_VAR, ConfigLoader
from tests.helpers import FakeEditor, FakeProvider, make_document_symbol, make_range


@pytest.fixture(autouse=True)
def test_mode(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
	"""Run with the short debounce window and a fresh configuration singleton."""
	monkeypatch.setenv(TEST_MODE_ENV_VAR, "1")
	ConfigLoader.reset_instance()
	yield
	ConfigLoader.reset_instance()


@pytest.fixture
def class_tree() -> list:
	"""Class Foo { Method bar(); Method baz(); } with children listed out of order."""
	return [
		make_document_symbol(
			"Foo",
			SymbolKind.Class,
			make_range(0, 0, 10, 1),
			children=[
				make_document_symbol("baz", SymbolKind.Method, make_range(6, 2, 9, 3)),
				make_document_symbol("bar", SymbolKind.Method, make_range(1, 2, 4, 3)),
			],
		)
	]


@pytest.fixture
def provider(class_tree: list) -> FakeProvider:
	return FakeProvider(class_tree)


@pytest.fixture
def editor() -> FakeEditor:
	return FakeEditor()
