from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .world.biomes import Biome, BiomeConfig, default_biome_configs, load_biome_configs

logger = logging.getLogger(__name__)

DEFAULT_FOV_RADIUS = 8


def _as_biome(value: str) -> Biome:
    return Biome(value.strip().lower())


@dataclass
class GenerationSettings:
    """Inputs for one floor build, as the CLI and tools see them.

    Values may come from environment variables (prefix HD_) and are then
    overridden by explicit arguments:

        settings = GenerationSettings.from_env()
        settings.floor = 7
        settings.validate()
    """

    seed: Optional[int] = None
    floor: int = 1
    biome: Optional[Biome] = None
    fov_radius: int = DEFAULT_FOV_RADIUS
    biome_file: Optional[Path] = None

    def validate(self) -> None:
        if self.floor < 1:
            raise ValueError(f"floor must be >= 1, got {self.floor}")
        if self.fov_radius < 0:
            raise ValueError(f"fov_radius must be >= 0, got {self.fov_radius}")
        if self.biome_file is not None and not Path(self.biome_file).exists():
            raise ValueError(f"Biome file not found: {self.biome_file}")

    def resolve_biome_config(self, biome: Biome) -> BiomeConfig:
        """Tuning table for `biome`, from `biome_file` when one is set."""
        if self.biome_file is None:
            return default_biome_configs()[biome]
        return load_biome_configs(Path(self.biome_file))[biome]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "floor": self.floor,
            "biome": self.biome.value if self.biome is not None else None,
            "fov_radius": self.fov_radius,
            "biome_file": str(self.biome_file) if self.biome_file is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationSettings":
        allowed = {f.name for f in dataclasses.fields(cls)}
        filtered = {k: v for k, v in data.items() if k in allowed and v is not None}
        if isinstance(filtered.get("biome"), str):
            filtered["biome"] = _as_biome(filtered["biome"])
        if "biome_file" in filtered:
            filtered["biome_file"] = Path(filtered["biome_file"])
        obj = cls(**filtered)
        obj.validate()
        return obj

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        env = os.environ if env is None else env
        mapping = {
            "HD_SEED": ("seed", int),
            "HD_FLOOR": ("floor", int),
            "HD_BIOME": ("biome", _as_biome),
            "HD_FOV_RADIUS": ("fov_radius", int),
            "HD_BIOME_FILE": ("biome_file", Path),
        }
        out: Dict[str, Any] = {}
        for env_key, (field_name, caster) in mapping.items():
            if env_key in env and env[env_key] != "":
                try:
                    out[field_name] = caster(env[env_key])
                except ValueError as exc:
                    logger.error("Invalid env for %s=%r: %s", env_key, env[env_key], exc)
        return cls(**out)
