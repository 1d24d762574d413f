"""Packaged tuning data (biome tables)."""
