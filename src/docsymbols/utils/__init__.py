"""Utility helpers for docsymbols."""
