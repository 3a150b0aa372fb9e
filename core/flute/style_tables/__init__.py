"""Bundled YAML tables: tuning styles and traditional length classes."""
