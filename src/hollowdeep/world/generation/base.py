from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...core.random import RandomSource
from ..biomes import Biome, BiomeConfig
from ..map import Map


class FloorGenerator(ABC):
    """Abstract base for floor layout generators."""

    @abstractmethod
    def generate(
        self,
        rng: RandomSource,
        floor: int,
        biome: Biome,
        config: Optional[BiomeConfig] = None,
    ) -> Map:
        """Generate a floor layout with start (and normally exit) placed."""
        raise NotImplementedError
