"""
Runtime configuration, read from GOJO_* environment variables.
Command line flags in gojo.main take precedence over these.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() == "true"


@dataclass
class Config:
    input_file: Optional[str] = None
    verbose: bool = False
    mega_verbose: bool = False
    repl_mode: bool = False
    max_loop_iterations: int = 0  # 0 means unlimited

    @property
    def log_level(self) -> int:
        if self.mega_verbose:
            return logging.DEBUG
        if self.verbose:
            return logging.INFO
        return logging.WARNING


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    if environ is None:
        environ = os.environ

    raw_limit = environ.get("GOJO_MAX_ITERATIONS", "").strip()
    try:
        max_loop_iterations = int(raw_limit) if raw_limit else 0
    except ValueError:
        raise ValueError(f"GOJO_MAX_ITERATIONS must be an integer, got {raw_limit!r}") from None
    if max_loop_iterations < 0:
        raise ValueError(f"GOJO_MAX_ITERATIONS must not be negative, got {max_loop_iterations}")

    return Config(
        input_file=environ.get("GOJO_INPUT_FILE") or None,
        verbose=_flag(environ, "GOJO_VERBOSE"),
        mega_verbose=_flag(environ, "GOJO_MEGA_VERBOSE"),
        repl_mode=_flag(environ, "GOJO_REPL_MODE"),
        max_loop_iterations=max_loop_iterations,
    )
