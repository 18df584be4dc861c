import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from speckle_tabular.convert.constants import (
    DEFAULT_FETCH_WORKERS,
    DOWNLOAD_EXCLUDED_FIELDS,
    MAX_RESOLVE_ITERATIONS,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "SPECKLE_TABULAR_"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s%s=%r, expected an integer", ENV_PREFIX, name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring %s%s=%r, expected a positive integer", ENV_PREFIX, name, raw)
        return default
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class PipelineSettings:
    """Knobs of the load / query pipeline"""

    max_iterations: int = MAX_RESOLVE_ITERATIONS
    max_workers: int = DEFAULT_FETCH_WORKERS
    download_excluded_fields: Tuple[str, ...] = DOWNLOAD_EXCLUDED_FIELDS
    continue_on_fail: bool = False

    @classmethod
    def from_env(cls, defaults: Optional["PipelineSettings"] = None) -> "PipelineSettings":
        base = defaults or cls()
        return cls(
            max_iterations=_env_int("MAX_ITERATIONS", base.max_iterations),
            max_workers=_env_int("MAX_WORKERS", base.max_workers),
            download_excluded_fields=base.download_excluded_fields,
            continue_on_fail=_env_flag("CONTINUE_ON_FAIL", base.continue_on_fail),
        )
