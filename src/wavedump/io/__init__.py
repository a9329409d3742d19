"""Rendering, serialization and preview output."""
