"""Bundled manifest templates."""
