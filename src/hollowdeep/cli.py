from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from .config import GenerationSettings
from .core.random import RandomSource
from .errors import HollowdeepError
from .logging_config import configure_logging
from .world.biomes import Biome, biome_for_floor
from .world.fov import compute_fov
from .world.generation import generate_floor
from .world.snapshot import MapSnapshot

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="hollowdeep",
        description="Generate a dungeon floor and print it as ASCII plus a JSON summary.",
    )
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: HD_SEED or random)")
    parser.add_argument("--floor", type=int, default=None, help="Floor number, 1-based (default: HD_FLOOR or 1)")
    parser.add_argument(
        "--biome",
        choices=[b.value for b in Biome],
        default=None,
        help="Force a biome instead of the floor's default",
    )
    parser.add_argument("--fov-radius", type=int, default=None, help="Reveal radius around the start")
    parser.add_argument("--biome-file", type=Path, default=None, help="YAML file overriding biome tuning")
    parser.add_argument("--no-fov", action="store_true", help="Print the whole map instead of the start's view")
    parser.add_argument("--themed", action="store_true", help="Draw walls and floors with the biome's glyph sets")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")
    parser.add_argument(
        "--trace-generation",
        action="store_true",
        help="Also log per-floor generator progress at DEBUG",
    )
    return parser.parse_args(argv)


def build_settings(args) -> GenerationSettings:
    settings = GenerationSettings.from_env()
    if args.seed is not None:
        settings.seed = args.seed
    if args.floor is not None:
        settings.floor = args.floor
    if args.biome is not None:
        settings.biome = Biome(args.biome)
    if args.fov_radius is not None:
        settings.fov_radius = args.fov_radius
    if args.biome_file is not None:
        settings.biome_file = args.biome_file
    if settings.seed is None:
        settings.seed = random.SystemRandom().randrange(0, 2**31)
    settings.validate()
    return settings


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(
        logging.DEBUG if args.debug else logging.WARNING,
        generation_level=logging.DEBUG if args.trace_generation else None,
    )

    try:
        settings = build_settings(args)
        biome = settings.biome or biome_for_floor(settings.floor)
        cfg = settings.resolve_biome_config(biome)
    except (ValueError, HollowdeepError) as exc:
        print(f"hollowdeep: {exc}", file=sys.stderr)
        return 2

    grid = generate_floor(RandomSource.from_seed(settings.seed), settings.floor, biome, cfg)

    visible = []
    if not args.no_fov:
        visible = compute_fov(grid, grid.start_pos, settings.fov_radius)

    lines = grid.to_ascii(cfg if args.themed else None)
    if not args.no_fov:
        # Unexplored cells stay blank, like the in-game fog.
        lines = [
            "".join(ch if grid.tiles[grid.xy_to_idx(x, y)].explored else " " for x, ch in enumerate(line))
            for y, line in enumerate(lines)
        ]
    print("\n".join(lines))

    summary = {
        "settings": settings.as_dict(),
        "biome": biome.value,
        "start": [grid.start_pos.x, grid.start_pos.y],
        "exit": [grid.exit_pos.x, grid.exit_pos.y] if grid.exit_pos else None,
        "elite_rooms": len(grid.elite_rooms),
        "shrines": [[p.x, p.y] for p in grid.shrine_positions()],
        "hazard_tiles": sum(1 for t in grid.tiles if t.tile_type.is_hazard),
        "visible_tiles": len(visible),
        "signature": MapSnapshot.from_map(grid).signature(),
    }
    # Print JSON summary so it can be diffed across runs
    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
