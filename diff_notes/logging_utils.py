"""
Logging helpers for diff-notes.

Library modules only ever call logging.getLogger(__name__); the CLI is
the single place that installs handlers, based on its -v count.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def level_for_verbosity(verbosity: int) -> int:
    """Map a -v count onto WARNING, INFO or DEBUG."""

    index = min(max(verbosity, 0), len(_LEVELS) - 1)
    return _LEVELS[index]


def configure_logging(verbosity: int, stream: Optional[TextIO] = None) -> None:
    """
    Configure the root logger for a CLI run.

    Log output goes to stderr by default so that it never mixes with the
    diff, search or export text written to stdout.
    """

    logging.basicConfig(
        level=level_for_verbosity(verbosity),
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream or sys.stderr,
        force=True,
    )
