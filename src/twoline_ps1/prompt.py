from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
import os
from pathlib import Path
import sys
from typing import Any
from .battery import BatteryInfo, battery_segment
from .cpu import CPUInfo
from .info import (
    check_enabled,
    clock_segment,
    cwd_segment,
    exit_code_segment,
    get_hostname,
    get_username,
    host_segment,
    jobs_segment,
    kerberos_segment,
    midway_segment,
    username_segment,
)
from .layout import Filler, Glyphs, PlanItem, Segment, compose, fixed_width
from .styles import ANSIStyler, Painter, PlainStyler, Theme
from .vcs import VCSInfo, external_vcs_info, git_status

#: Terminal width to assume when it can't be detected
DEFAULT_WIDTH = 100


@dataclass(frozen=True)
class RenderContext:
    """Everything about the environment that rendering the prompt depends on"""

    #: Width of the terminal in columns
    width: int

    paint: Painter

    #: The frame decorations, painted with ``paint``
    glyphs: Glyphs

    #: The directory to describe, or `None` if the shell's working directory
    #: no longer exists
    workdir: Path | None

    home: Path

    #: Exit status of the previously run command
    exit_code: int = 0

    running_jobs: bool = False
    suspended_jobs: bool = False

    #: Whether to query the battery status
    show_battery: bool = False

    #: Whether to show empty brackets in place of a missing battery status
    battery_placeholder: bool = True

    #: External command that prints the VCS status; `None` means to use the
    #: built-in Git support, and an empty string disables VCS support
    vcs_command: str | None = None

    #: Timeout in seconds for the built-in ``git status`` call
    git_timeout: float = 3

    #: Command for reformatting the working directory path, if any
    wd_format: str | None = None

    check_kerberos: bool = False
    check_midway: bool = False

    now: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(
        cls,
        theme: Theme,
        width: int | None = None,
        color: bool | None = None,
        workdir: str | None = None,
        check_kerberos: bool = False,
        check_midway: bool = False,
        **kwargs: Any,
    ) -> RenderContext:
        """
        Resolve the terminal width, color mode, and working directory from the
        environment (unless given explicitly) and paint the glyphs with the
        resulting color mode
        """
        if color is None:
            color = color_supported()
        paint = Painter(ANSIStyler() if color else PlainStyler(), theme)
        home = Path(os.environ.get("HOME") or Path.home())
        return cls(
            width=width if width is not None and width > 0 else get_width(),
            paint=paint,
            glyphs=Glyphs.build(paint),
            workdir=resolve_workdir(workdir, home),
            home=home,
            check_kerberos=check_kerberos or check_enabled(home, "kerberos"),
            check_midway=check_midway or check_enabled(home, "midway"),
            **kwargs,
        )


def get_width() -> int:
    """
    Determine the width of the terminal attached to any of the standard
    streams (stdout is usually captured by the shell), falling back to
    :envvar:`COLUMNS` and then `DEFAULT_WIDTH`
    """
    for stream in (sys.stdout, sys.stderr, sys.stdin):
        try:
            return os.get_terminal_size(stream.fileno()).columns
        except (AttributeError, ValueError, OSError):
            pass
    try:
        return int(os.environ["COLUMNS"])
    except (KeyError, ValueError):
        return DEFAULT_WIDTH


def color_supported() -> bool:
    if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
        return False
    try:
        return sys.stdout.isatty()
    except ValueError:
        return False


def resolve_workdir(workdir: str | None, home: Path) -> Path | None:
    """
    Return the directory the prompt should describe: ``workdir`` (with a
    leading tilde expanded on a best-effort basis) if given, otherwise the
    current directory, preferring :envvar:`PWD` as it does not resolve
    symlinks.  Returns `None` if the current directory no longer exists.
    """
    if workdir:
        if workdir == "~" or workdir.startswith("~/"):
            return home / workdir[2:]
        return Path(workdir)
    try:
        cwd = os.getcwd()
    except FileNotFoundError:
        return None
    pwd = os.environ.get("PWD")
    try:
        if pwd and os.path.samefile(pwd, cwd):
            return Path(pwd)
    except OSError:
        pass
    return Path(cwd)


def build_line1(ctx: RenderContext) -> Segment:
    """
    Build the first line of the prompt: ``-[user@host]-`` on the left and
    ``-{directory}-`` on the right, with dashes in between
    """
    g = ctx.glyphs
    left: list[PlanItem] = [
        g.spacer,
        g.lbracket,
        username_segment(get_username(), ctx.paint),
        jobs_segment(ctx.running_jobs, ctx.suspended_jobs, ctx.paint),
        host_segment(get_hostname(), CPUInfo.get(), ctx.paint),
        g.rbracket,
        g.spacer,
    ]
    frame: list[PlanItem] = [g.spacer, g.lbrace, g.rbrace, g.spacer]
    # The directory gets whatever is left after everything else, including
    # the filler's minimum of one glyph.
    budget = ctx.width - fixed_width(left) - fixed_width(frame) - 1
    cwd = cwd_segment(ctx.workdir, ctx.home, budget, ctx.paint, ctx.wd_format)
    return compose(
        ctx.width,
        left + [Filler(g.spacer), g.spacer, g.lbrace, cwd, g.rbrace, g.spacer],
    )


def vcs_info(ctx: RenderContext) -> VCSInfo | None:
    if ctx.workdir is None or ctx.vcs_command == "":
        return None
    elif ctx.vcs_command is None:
        gs = git_status(ctx.workdir, timeout=ctx.git_timeout)
        return gs.display(ctx.paint) if gs is not None else None
    else:
        return external_vcs_info(ctx.vcs_command, ctx.workdir, ctx.paint)


def build_line2(ctx: RenderContext) -> Segment:
    """
    Build the second line of the prompt: the time, battery, credential
    warnings, exit status, and VCS branch on the left, and the VCS file
    summary on the right
    """
    g = ctx.glyphs
    if ctx.show_battery:
        battery = BatteryInfo.get()
    else:
        battery = None
    items: list[PlanItem] = [
        g.spacer,
        g.spacer,
        clock_segment(ctx.now, ctx.paint),
        battery_segment(battery, ctx.paint, g, placeholder=ctx.battery_placeholder),
        kerberos_segment(ctx.check_kerberos, ctx.paint),
        midway_segment(ctx.check_midway, ctx.paint),
        exit_code_segment(ctx.exit_code, ctx.paint),
    ]
    if (vcs := vcs_info(ctx)) is not None:
        items += [vcs.branch, Filler(g.space), vcs.files]
    else:
        items.append(Filler(g.space))
    items += [g.space, g.spacer, g.spacer]
    return compose(ctx.width, items)


def render(ctx: RenderContext) -> tuple[Segment, Segment]:
    return (build_line1(ctx), build_line2(ctx))
