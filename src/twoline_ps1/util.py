from __future__ import annotations
import logging
import os
from pathlib import Path
import re
import subprocess

log = logging.getLogger(__name__)

#: Matches a single ANSI SGR ("Select Graphic Rendition") escape sequence,
#: with or without numeric parameters
SGR_RE = re.compile(r"\x1B\[[0-9;]*m")

#: Marker prepended to a path that has been cut short at the front
ELLIPSIS = "…"


def strip_ansi(s: str) -> str:
    """Remove all ANSI SGR escape sequences from ``s``"""
    return SGR_RE.sub("", s)


def visible_width(s: str) -> int:
    """
    Return the number of terminal columns that ``s`` occupies when printed,
    i.e., the number of code points left after removing SGR escape sequences.
    Escape sequences other than SGR are counted as-is, and every code point is
    assumed to be one column wide.
    """
    return len(strip_ansi(s))


def truncate_start(path: str, max_width: int) -> str:
    """
    If ``path`` is wider than ``max_width``, cut characters off its front and
    replace them with an ellipsis so that the result is exactly ``max_width``
    columns wide.  A ``max_width`` of zero or less produces the empty string.

    Any escape sequences in ``path`` are removed first.
    """
    path = strip_ansi(path)
    if len(path) <= max_width:
        return path
    elif max_width <= 0:
        return ""
    keep = max_width - len(ELLIPSIS)
    return ELLIPSIS + (path[-keep:] if keep > 0 else "")


def cat(path: Path) -> str | None:
    """
    Return the contents of the given file with leading & trailing whitespace
    stripped.  If the file cannot be read, return `None`.
    """
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as e:
        log.debug("Could not read %s: %s", path, e)
        return None


def run(
    *args: str | os.PathLike[str],
    cwd: str | os.PathLike[str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str] | None:
    """
    Run a command (suppressing stderr) and return the completed process
    regardless of its exit status.  If the command cannot be run at all or its
    runtime exceeds ``timeout``, return `None`.
    """
    try:
        return subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log.debug("Command %r timed out after %s seconds", args, timeout)
        return None
    except OSError as e:
        log.debug("Could not run command %r: %s", args, e)
        return None
