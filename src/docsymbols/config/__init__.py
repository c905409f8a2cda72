"""Configuration for docsymbols."""

from docsymbols.config.config_schema import AppConfigSchema, SymbolsConfigSchema

__all__ = ["AppConfigSchema", "SymbolsConfigSchema"]
