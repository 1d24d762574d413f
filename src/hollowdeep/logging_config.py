import logging
import os
from typing import Optional

# Per-floor generation progress is chatty at DEBUG; it gets its own knob.
GENERATION_LOGGER = "hollowdeep.world.generation"


def _level_from_env(var: str, fallback: int) -> int:
    level_name = os.getenv(var)
    if not level_name:
        return fallback
    return getattr(logging, level_name.upper(), fallback)


def configure_logging(default_level: int = logging.INFO, generation_level: Optional[int] = None) -> None:
    """Configure root logging for the hollowdeep tools.

    The root level honours HD_LOG_LEVEL. The floor generators log under
    `hollowdeep.world.generation`; that subtree honours HD_GENERATION_LOG_LEVEL
    and otherwise stays at INFO or quieter, so `--debug` output is not buried
    in per-tile placement messages unless asked for explicitly.
    """
    level = _level_from_env("HD_LOG_LEVEL", default_level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )

    if generation_level is None:
        generation_level = max(level, logging.INFO)
    logging.getLogger(GENERATION_LOGGER).setLevel(_level_from_env("HD_GENERATION_LOG_LEVEL", generation_level))
