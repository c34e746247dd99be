"""Per-job log formatting and masking of secret values."""

from __future__ import annotations

import itertools
import logging
import os
import sys
import threading
from collections.abc import Iterable, Mapping
from typing import IO, Any

RED = 31
GREEN = 32
YELLOW = 33
BLUE = 34
MAGENTA = 35
CYAN = 36
GRAY = 37

COLORS: tuple[int, ...] = (BLUE, YELLOW, GREEN, MAGENTA, RED, GRAY, CYAN)

MASK = "***"

_color_lock = threading.Lock()
_color_counter = itertools.count(1)


def next_color() -> int:
    """Return the next colour from the rotation, one per job logger."""
    with _color_lock:
        index = next(_color_counter)
    return COLORS[index % len(COLORS)]


def _is_terminal(stream: IO[Any] | None) -> bool:
    if stream is None:
        return False
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (ValueError, OSError):
        return False


def colour_enabled(stream: IO[Any] | None, environ: Mapping[str, str] | None = None) -> bool:
    """Decide whether output to ``stream`` is coloured.

    ``CLICOLOR_FORCE`` set to anything but ``0`` forces colour, ``0`` disables
    it; otherwise ``CLICOLOR=0`` disables it and a terminal enables it.
    """
    env = os.environ if environ is None else environ
    coloured = _is_terminal(stream)
    force = env.get("CLICOLOR_FORCE")
    if force is not None:
        return force != "0"
    if env.get("CLICOLOR") == "0":
        return False
    return coloured


def extend_step_ids(step_ids: Iterable[str] | None, step_id: str) -> list[str]:
    """Return the chain of step ids with ``step_id`` appended."""
    return [*(step_ids or ()), step_id]


class JobLogFormatter(logging.Formatter):
    """Formats records as ``[job] message`` lines, optionally in colour.

    Records may carry ``job``, ``raw_output`` and ``dryrun`` attributes.
    When ``colored`` is None, colour is decided from standard output and the
    environment at each call.
    """

    def __init__(self, color: int = BLUE, colored: bool | None = None) -> None:
        super().__init__()
        self.color = color
        self.colored = colored

    def _use_colour(self) -> bool:
        if self.colored is None:
            return colour_enabled(sys.stdout)
        return self.colored

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.endswith("\n"):
            message = message[:-1]
        job = getattr(record, "job", "")
        debug_flag = "[DEBUG] " if record.levelno == logging.DEBUG else ""
        raw = getattr(record, "raw_output", False) is True
        dryrun = getattr(record, "dryrun", False) is True

        if self._use_colour():
            if raw:
                return f"\x1b[{self.color}m|\x1b[0m {message}"
            if dryrun:
                return (
                    f"\x1b[1m\x1b[{GRAY}m\x1b[7m*DRYRUN*\x1b[0m "
                    f"\x1b[{self.color}m[{job}] \x1b[0m{debug_flag}{message}"
                )
            return f"\x1b[{self.color}m[{job}] \x1b[0m{debug_flag}{message}"

        if raw:
            return f"[{job}]   | {message}"
        if dryrun:
            return f"*DRYRUN* [{job}] {debug_flag}{message}"
        return f"[{job}] {debug_flag}{message}"


class MaskingFilter(logging.Filter):
    """Replaces secret values and registered masks in log messages with ``***``.

    ``masks`` is read at each record, so values added to the same list later
    are masked too. With ``insecure`` set, records pass unchanged.
    """

    def __init__(
        self,
        secrets: Mapping[str, str] | None = None,
        masks: list[str] | None = None,
        insecure: bool = False,
    ) -> None:
        super().__init__()
        self.secrets = dict(secrets or {})
        self.masks = masks if masks is not None else []
        self.insecure = insecure

    def filter(self, record: logging.LogRecord) -> bool:
        if self.insecure:
            return True
        message = record.getMessage()
        for value in itertools.chain(self.secrets.values(), self.masks):
            if value:
                message = message.replace(value, MASK)
        record.msg = message
        record.args = ()
        return True