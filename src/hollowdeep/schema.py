from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib.resources import files as resource_files
from typing import Any, Dict, Type

from jsonschema import Draft202012Validator

from .errors import HollowdeepError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    """
    Load a bundled JSON schema from hollowdeep/data/schemas.

    Cached since the schemas are static.
    """
    text = resource_files("hollowdeep.data").joinpath("schemas").joinpath(f"{name}.schema.json").read_text(
        encoding="utf-8"
    )
    logger.debug("Loaded schema %s", name)
    return json.loads(text)


def validate_document(name: str, data: Any, error_cls: Type[HollowdeepError]) -> None:
    """
    Validate `data` against the named schema.

    Raises:
        error_cls with every violation listed, one per line.
    """
    validator = Draft202012Validator(load_schema(name))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return
    lines = []
    for err in errors:
        where = ".".join(str(p) for p in err.absolute_path) or "$"
        logger.error("%s schema validation error at %s: %s", name, where, err.message)
        lines.append(f" - At {where}: {err.message}")
    raise error_cls(f"{name} failed validation:\n" + "\n".join(lines))


__all__ = ["load_schema", "validate_document"]
