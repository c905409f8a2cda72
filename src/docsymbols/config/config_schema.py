"""Pydantic schemas for docsymbols configuration."""

from pydantic import BaseModel, Field

DEFAULT_DEBOUNCE_DELAY = 0.5
TEST_DEBOUNCE_DELAY = 0.01


class SymbolsConfigSchema(BaseModel):
	"""Settings for the document symbols cache and the current function display."""

	current_function_auto_update: bool = Field(
		default=False, description="Publish the current function name on cursor hold"
	)
	kind_labels: dict[str, str] = Field(
		default_factory=dict, description="Short display labels keyed by lower-cased symbol kind"
	)
	debounce_delay: float = Field(
		default=DEFAULT_DEBOUNCE_DELAY, ge=0, description="Quiescence window in seconds before a background fetch"
	)


class AppConfigSchema(BaseModel):
	"""Top-level configuration schema."""

	symbols: SymbolsConfigSchema = Field(default_factory=SymbolsConfigSchema)
