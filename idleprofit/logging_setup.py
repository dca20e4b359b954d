"""Logging configuration shared by the CLI and embedding applications."""

import logging
import os
from typing import Optional


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None or value == "" else value


def configure_logging(
    *,
    level: Optional[str] = None,
    default_level: str = "WARNING",
    fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    force: bool = True,
) -> None:
    """Configure stdlib logging for the idleprofit loggers.

    An explicit level wins over the environment.

    Environment variables:
    - LOG_LEVEL: overrides default_level (e.g. DEBUG, INFO)
    - LOG_FORCE: when set to 0/false, disables reconfiguration
    """
    level_name = (level or _env("LOG_LEVEL", default_level)).upper()
    resolved = getattr(logging, level_name, logging.WARNING)

    env_force = _env("LOG_FORCE", "1").lower() not in {"0", "false", "no"}

    logging.basicConfig(
        level=resolved, format=fmt, datefmt=datefmt, force=(force and env_force)
    )
    logging.getLogger("idleprofit").setLevel(resolved)
