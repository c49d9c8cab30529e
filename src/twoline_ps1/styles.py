from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Protocol
from .util import strip_ansi


class Color(Enum):
    """
    An enumeration of the supported terminal colors.  Each color's value
    equals its xterm number.
    """

    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    LIGHT_BLACK = 8
    LIGHT_RED = 9
    LIGHT_GREEN = 10
    LIGHT_YELLOW = 11
    LIGHT_BLUE = 12
    LIGHT_MAGENTA = 13
    LIGHT_CYAN = 14
    LIGHT_WHITE = 15

    def asfg(self) -> int:
        """
        Return the ANSI SGR parameter for setting the color as the foreground
        color
        """
        c = self.value
        return c + 30 if c < 8 else c + 82

    def asbg(self) -> int:
        """
        Return the ANSI SGR parameter for setting the color as the background
        color
        """
        c = self.value
        return c + 40 if c < 8 else c + 92


@dataclass(frozen=True)
class Style:
    color: Color | None = None
    bold: bool = False
    bg: Color | None = None
    blink: bool = False

    def as_params(self) -> list[str]:
        params = []
        if self.color is not None:
            params.append(str(self.color.asfg()))
        if self.bg is not None:
            params.append(str(self.bg.asbg()))
        if self.bold:
            params.append("1")
        if self.blink:
            params.append("5")
        return params


class Styler(Protocol):
    #: Whether the styler emits escape sequences at all
    colors: ClassVar[bool]

    def __call__(self, s: str, style: Style) -> str: ...


class ANSIStyler:
    """Class for styling strings for display immediately in the terminal"""

    colors: ClassVar[bool] = True

    def __call__(self, s: str, style: Style) -> str:
        r"""
        Stylize the string ``s`` with ANSI escape sequences.  If
        ``style.color`` or ``style.bg`` is non-`None`, the string will be
        stylized with the given foreground or background color.  If
        ``style.bold`` or ``style.blink`` is true, the string will be stylized
        bold or blinking.  Empty strings are returned unchanged.

        :param str s: the string to stylize
        :param Style style: the colors & attributes to stylize the string with
        """
        if s and (params := style.as_params()):
            s = f"\x1B[{';'.join(params)}m{s}\x1B[m"
        return s


class PlainStyler:
    """Class for "styling" strings when color output is disabled"""

    colors: ClassVar[bool] = False

    def __call__(self, s: str, style: Style) -> str:
        return s


StyleClass = Enum(
    "StyleClass",
    [
        "DEFAULT",
        "USER",
        "USER_ROOT",
        "USER_ERROR",
        "JOBS",
        "JOBS_RUNNING",
        "JOBS_SUSPENDED",
        "HOST",
        "LOAD_LOW",
        "LOAD_MEDIUM",
        "LOAD_HIGH",
        "LOAD_CRITICAL",
        "CWD",
        "CWD_MISSING",
        "CWD_READONLY",
        "DISK_WARN",
        "DISK_HIGH",
        "DISK_FULL",
        "DF_FAILED",
        "DF_NO_OUTPUT",
        "DF_BAD_LINE",
        "DF_BAD_PERCENT",
        "CLOCK",
        "BATTERY_LOW",
        "BATTERY_CRITICAL",
        "EXIT_CODE",
        "CREDENTIALS",
        "GIT_CLEAN",
        "GIT_AHEAD",
        "GIT_BEHIND",
        "GIT_STAGED",
        "GIT_UNSTAGED",
        "GIT_UNTRACKED",
        "GIT_CONFLICT",
        "GIT_STATE",
        "GIT_MODIFIED",
        "GIT_ADDED",
        "GIT_DELETED",
        "GIT_RENAMED",
        "GIT_COPIED",
        "GIT_UPDATED",
        "GIT_IGNORED",
        "GIT_FILES_UNTRACKED",
    ],
)

Theme = dict[StyleClass, Style]

DARK_THEME = {
    StyleClass.DEFAULT: Style(Color.GREEN),
    StyleClass.USER: Style(Color.CYAN),
    StyleClass.USER_ROOT: Style(Color.LIGHT_YELLOW),
    StyleClass.USER_ERROR: Style(Color.LIGHT_RED),
    StyleClass.JOBS: Style(Color.CYAN),
    StyleClass.JOBS_RUNNING: Style(Color.LIGHT_GREEN, bold=True),
    StyleClass.JOBS_SUSPENDED: Style(Color.LIGHT_RED, bold=True),
    StyleClass.HOST: Style(Color.CYAN),
    StyleClass.LOAD_LOW: Style(Color.LIGHT_YELLOW, bold=True),
    StyleClass.LOAD_MEDIUM: Style(Color.LIGHT_MAGENTA, bold=True),
    StyleClass.LOAD_HIGH: Style(Color.LIGHT_RED, bold=True),
    StyleClass.LOAD_CRITICAL: Style(Color.LIGHT_WHITE, bold=True, bg=Color.RED),
    StyleClass.CWD: Style(Color.LIGHT_GREEN),
    StyleClass.CWD_MISSING: Style(Color.LIGHT_RED, bold=True, blink=True),
    StyleClass.CWD_READONLY: Style(Color.RED),
    StyleClass.DISK_WARN: Style(Color.LIGHT_YELLOW, bold=True),
    StyleClass.DISK_HIGH: Style(Color.LIGHT_RED, bold=True),
    StyleClass.DISK_FULL: Style(Color.LIGHT_WHITE, bold=True, bg=Color.RED),
    StyleClass.DF_FAILED: Style(Color.LIGHT_MAGENTA, bold=True),
    StyleClass.DF_NO_OUTPUT: Style(Color.MAGENTA, bold=True),
    StyleClass.DF_BAD_LINE: Style(Color.YELLOW),
    StyleClass.DF_BAD_PERCENT: Style(Color.LIGHT_BLACK),
    StyleClass.CLOCK: Style(Color.YELLOW),
    StyleClass.BATTERY_LOW: Style(Color.LIGHT_YELLOW),
    StyleClass.BATTERY_CRITICAL: Style(Color.LIGHT_RED, bold=True),
    StyleClass.EXIT_CODE: Style(Color.LIGHT_RED),
    StyleClass.CREDENTIALS: Style(Color.LIGHT_RED, bold=True),
    StyleClass.GIT_CLEAN: Style(Color.GREEN),
    StyleClass.GIT_AHEAD: Style(Color.MAGENTA),
    StyleClass.GIT_BEHIND: Style(Color.RED),
    StyleClass.GIT_STAGED: Style(Color.YELLOW),
    StyleClass.GIT_UNSTAGED: Style(Color.LIGHT_YELLOW),
    StyleClass.GIT_UNTRACKED: Style(Color.LIGHT_RED),
    StyleClass.GIT_CONFLICT: Style(Color.LIGHT_MAGENTA),
    StyleClass.GIT_STATE: Style(Color.MAGENTA),
    StyleClass.GIT_MODIFIED: Style(Color.GREEN),
    StyleClass.GIT_ADDED: Style(Color.LIGHT_GREEN),
    StyleClass.GIT_DELETED: Style(Color.LIGHT_RED),
    StyleClass.GIT_RENAMED: Style(Color.LIGHT_YELLOW),
    StyleClass.GIT_COPIED: Style(Color.LIGHT_BLUE),
    StyleClass.GIT_UPDATED: Style(Color.LIGHT_MAGENTA),
    StyleClass.GIT_IGNORED: Style(Color.CYAN),
    StyleClass.GIT_FILES_UNTRACKED: Style(Color.RED),
}

LIGHT_THEME = DARK_THEME | {
    StyleClass.USER: Style(Color.BLUE),
    StyleClass.USER_ROOT: Style(Color.YELLOW, bold=True),
    StyleClass.JOBS: Style(Color.BLUE),
    StyleClass.HOST: Style(Color.BLUE),
    StyleClass.LOAD_LOW: Style(Color.YELLOW, bold=True),
    StyleClass.CWD: Style(Color.GREEN),
    StyleClass.DISK_WARN: Style(Color.YELLOW, bold=True),
    StyleClass.BATTERY_LOW: Style(Color.YELLOW),
    StyleClass.GIT_UNSTAGED: Style(Color.YELLOW, bold=True),
    StyleClass.GIT_IGNORED: Style(Color.BLUE),
}

THEMES = {
    "dark": DARK_THEME,
    "light": LIGHT_THEME,
}


@dataclass
class Painter:
    styler: Styler
    theme: Theme

    def __call__(self, s: str, klass: StyleClass) -> str:
        return self.styler(s, self.theme[klass])

    @property
    def colors(self) -> bool:
        return self.styler.colors

    def passthrough(self, s: str) -> str:
        """
        Return a string that was colored by an external program, stripped of
        its escape sequences if color output is disabled
        """
        return s if self.colors else strip_ansi(s)
