from __future__ import annotations


class HollowdeepError(Exception):
    """Base class for errors raised at the edges of the floor core."""


class BiomeConfigError(HollowdeepError):
    """Biome tuning data is missing or malformed."""


class SnapshotError(HollowdeepError):
    """A persisted map could not be decoded."""
