"""Compiler configuration.

Read from environment variables, optionally seeded from a ``.env`` file at
the project root:

- ODM_COMPILER_LOG_LEVEL: logging level name (default INFO)
- ODM_COMPILER_FAIL_FAST: stop at the first diagnostic (default false)
- ODM_COMPILER_EMITTERS: comma separated emitter names (default: all built-ins)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Parent of every module logger in the package
PACKAGE_LOGGER = "src.schema_compiler"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_bool(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


def _parse_list(value: str | None) -> tuple[str, ...] | None:
    if not value:
        return None
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


@dataclass(frozen=True)
class CompilerSettings:
    """Settings for one compiler invocation."""

    log_level: str = "INFO"
    fail_fast: bool = False
    emitters: tuple[str, ...] | None = None  # None = all registered emitters

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> CompilerSettings:
        """Build settings from the environment.

        Args:
            env_file: Optional .env file; defaults to ``<project root>/.env``.
                Existing environment variables take precedence.
        """
        env_path = env_file or Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        return cls(
            log_level=os.getenv("ODM_COMPILER_LOG_LEVEL", "INFO").upper(),
            fail_fast=_parse_bool(os.getenv("ODM_COMPILER_FAIL_FAST")),
            emitters=_parse_list(os.getenv("ODM_COMPILER_EMITTERS")),
        )


def apply_log_level(settings: CompilerSettings) -> None:
    """Set the level of every compiler logger (the package logger)."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(settings.log_level)


def configure_logging(settings: CompilerSettings) -> None:
    """Configure root logging for command-line style use of the compiler.

    Installs a root handler, so it is left to the application entry point.
    SchemaPipeline only calls apply_log_level().
    """
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    apply_log_level(settings)
