from __future__ import annotations
from datetime import datetime
import logging
import os
from pathlib import Path
import pwd
import shlex
import socket
from .cpu import CPUInfo
from .layout import EMPTY, Segment
from .styles import Painter
from .styles import StyleClass as SC
from .util import run, strip_ansi, truncate_start

log = logging.getLogger(__name__)

#: Displayed in place of the username if it can't be determined
USER_SENTINEL = "!user!"

#: Displayed in place of the hostname if it can't be determined
HOST_SENTINEL = "!host!"

#: Displayed in place of the working directory if it no longer exists
MISSING_DIR = "<missing>"

#: Command that prints a friendlier name for the local host, if installed
PRETTY_HOSTNAME_CMD = "pretty-hostname"

#: Directory (relative to :envvar:`HOME`) containing the marker files that
#: switch on the credential checks
CHECKS_DIR = Path(".host", "config")


def get_username() -> str | None:
    try:
        return pwd.getpwuid(os.geteuid()).pw_name
    except KeyError as e:
        log.debug("Could not look up current user: %s", e)
        return None


def username_segment(name: str | None, paint: Painter) -> Segment:
    if name is None:
        return Segment.painted(USER_SENTINEL, paint, SC.USER_ERROR)
    elif name == "root":
        return Segment.painted(name, paint, SC.USER_ROOT)
    else:
        return Segment.painted(name, paint, SC.USER)


def jobs_segment(running: bool, suspended: bool, paint: Painter) -> Segment:
    """
    The "@" between the username and hostname doubles as an indicator of
    whether the shell has any background jobs
    """
    if suspended:
        klass = SC.JOBS_SUSPENDED
    elif running:
        klass = SC.JOBS_RUNNING
    else:
        klass = SC.JOBS
    return Segment.painted("@", paint, klass)


def get_hostname() -> str:
    r = run(PRETTY_HOSTNAME_CMD)
    if r is not None and r.returncode == 0 and (name := strip_ansi(r.stdout).strip()):
        return name
    try:
        return strip_ansi(socket.gethostname()).strip() or HOST_SENTINEL
    except OSError as e:
        log.debug("Could not get hostname: %s", e)
        return HOST_SENTINEL


def host_segment(hostname: str, cpu: CPUInfo, paint: Painter) -> Segment:
    """
    Show the hostname colored according to the one-minute load average
    relative to the number of processors.  Once the load passes 50%, the load
    average itself is shown as well.
    """
    pct = cpu.load1_pct
    if pct > 1.00:
        klass = SC.LOAD_CRITICAL
    elif pct > 0.75:
        klass = SC.LOAD_HIGH
    elif pct > 0.50:
        klass = SC.LOAD_MEDIUM
    elif pct > 0.25:
        klass = SC.LOAD_LOW
    else:
        klass = SC.HOST
    if pct > 0.50:
        hostname = f"{hostname}({cpu.load1:0.2f})"
    return Segment.painted(hostname, paint, klass)


def home_relative(path: str, home: Path) -> str:
    """
    If ``path`` is at or under ``home`` (either as given or with symlinks
    resolved), rewrite it to start with ``~``
    """
    p = Path(path)
    for h in dict.fromkeys([home, home.resolve()]):
        try:
            return str("~" / p.relative_to(h))
        except ValueError:
            pass
    return path


def format_dir(command: str, workdir: Path) -> str | None:
    """
    Pass the working directory through a user-supplied formatting command,
    returning its output or `None` if it fails
    """
    try:
        argv = shlex.split(command)
    except ValueError as e:
        log.debug("Invalid directory formatting command %r: %s", command, e)
        return None
    if not argv:
        return None
    r = run(*argv, str(workdir), cwd=workdir)
    if r is None or r.returncode != 0:
        return None
    return strip_ansi(r.stdout).strip() or None


def parse_df(output: str) -> tuple[str, SC]:
    """
    Given the output of :command:`df -P`, return a marker with which to wrap
    the directory (empty if everything's fine) and the directory's style
    according to how full the filesystem is
    """
    lines = output.strip().splitlines()
    if len(lines) < 2:
        return ("~", SC.DF_NO_OUTPUT)
    fields = lines[1].split()
    if len(fields) < 5:
        return ("+", SC.DF_BAD_LINE)
    try:
        used = int(fields[4].removesuffix("%"))
    except ValueError:
        return ("=", SC.DF_BAD_PERCENT)
    if used > 90:
        return ("", SC.DISK_FULL)
    elif used > 80:
        return ("", SC.DISK_HIGH)
    elif used > 70:
        return ("", SC.DISK_WARN)
    else:
        return ("", SC.CWD)


def dir_status(workdir: Path) -> tuple[str, SC]:
    """
    Determine how to mark & color the working directory: read-only
    directories are shown in red; writable ones according to the free space
    on their filesystem
    """
    if not os.access(workdir, os.W_OK):
        return ("", SC.CWD_READONLY)
    r = run("df", "-P", str(workdir), cwd=workdir)
    if r is None or r.returncode != 0:
        return ("!", SC.DF_FAILED)
    return parse_df(r.stdout)


def cwd_segment(
    workdir: Path | None,
    home: Path,
    max_width: int,
    paint: Painter,
    wd_format: str | None = None,
) -> Segment:
    """
    Show the path to the working directory, relative to ``home`` where
    possible, truncated at the front so that the segment (including any
    marker characters) is no more than ``max_width`` columns wide
    """
    if workdir is None:
        return Segment.painted(MISSING_DIR, paint, SC.CWD_MISSING)
    path = strip_ansi(str(workdir))
    if wd_format and (formatted := format_dir(wd_format, workdir)) is not None:
        path = formatted
    path = home_relative(path, home)
    marker, klass = dir_status(workdir)
    path = truncate_start(path, max_width - 2 * len(marker))
    return Segment.painted(marker + path + marker, paint, klass)


def clock_segment(now: datetime, paint: Painter) -> Segment:
    return Segment.painted(now.strftime("%H:%M"), paint, SC.CLOCK)


def exit_code_segment(exit_code: int, paint: Painter) -> Segment:
    if exit_code == 0:
        return EMPTY
    return Segment.painted(f" :{exit_code}:", paint, SC.EXIT_CODE)


def check_enabled(home: Path, name: str) -> bool:
    """
    Test whether the credential check ``name`` has been switched on by
    creating a marker file in the user's host configuration
    """
    marker = home / CHECKS_DIR / f"check_{name}"
    try:
        marker.stat()
    except FileNotFoundError:
        return False
    except OSError as e:
        log.debug("Could not check for %s: %s", marker, e)
        return False
    return True


def has_kerberos_ticket() -> bool:
    r = run("klist", "-s")
    return r is not None and r.returncode == 0


def has_midway_cert() -> bool:
    r = run("mwinit", "-l")
    return r is not None and r.returncode == 0 and r.stdout != ""


def credential_segment(marker: str, satisfied: bool, paint: Painter) -> Segment:
    """
    Show `` [marker]`` if a required credential is missing, otherwise nothing
    """
    if satisfied:
        return EMPTY
    return Segment.painted(f" [{marker}]", paint, SC.CREDENTIALS)


def kerberos_segment(enabled: bool, paint: Painter) -> Segment:
    if not enabled:
        return EMPTY
    return credential_segment("K", has_kerberos_ticket(), paint)


def midway_segment(enabled: bool, paint: Painter) -> Segment:
    if not enabled:
        return EMPTY
    return credential_segment("M", has_midway_cert(), paint)
