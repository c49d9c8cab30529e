from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
import logging
import re
from .layout import EMPTY, Glyphs, Segment
from .styles import Painter
from .styles import StyleClass as SC
from .util import run, strip_ansi

log = logging.getLogger(__name__)

#: Command (and arguments) that reports the laptop battery's status
BATTERY_CMD = ("ibam-battery-prompt", "-p")

#: Above this percentage, the battery gauge is shown instead of the time left
GAUGE_THRESHOLD = 20

#: At or below this percentage, the time left is shown in an alarming color
CRITICAL_THRESHOLD = 10


@dataclass
class BatteryInfo:
    #: The charge gauge as colored by the battery command
    colored_gauge: str = ""

    #: Estimated time until the battery is empty (or full, when charging)
    time_left: timedelta = timedelta()

    charging: bool = False

    #: Charge level, from 0 to 100
    percent: int = 0

    @property
    def gauge(self) -> str:
        return strip_ansi(self.colored_gauge)

    @classmethod
    def parse(cls, output: str) -> BatteryInfo:
        """
        Parse the output of :command:`ibam-battery-prompt -p`, which consists
        of the following lines:

        1. the colored charge gauge
        2. the colored time left, as ``H:MM``
        3. whether the battery is charging (``true``/``false``)
        4. (unused)
        5. the charge percentage

        Missing or malformed lines leave the corresponding fields at their
        defaults.
        """
        lines = [ln.strip() for ln in output.splitlines()]
        info = cls()
        if len(lines) > 0:
            info.colored_gauge = lines[0]
        if len(lines) > 1:
            info.time_left = parse_hours_minutes(strip_ansi(lines[1]))
        if len(lines) > 2:
            info.charging = lines[2].lower() in ("1", "t", "true")
        if len(lines) > 4:
            try:
                info.percent = int(lines[4])
            except ValueError:
                log.debug("Invalid battery percentage: %r", lines[4])
        return info

    @classmethod
    def get(cls) -> BatteryInfo | None:
        r = run(*BATTERY_CMD)
        if r is None or r.returncode != 0:
            log.debug("Could not get battery information")
            return None
        return cls.parse(r.stdout)


def parse_hours_minutes(s: str) -> timedelta:
    if m := re.fullmatch(r"(\d+):(\d+)", s):
        return timedelta(hours=int(m[1]), minutes=int(m[2]))
    else:
        return timedelta()


def format_time_left(td: timedelta) -> str:
    minutes = int(td.total_seconds()) // 60
    return f"{minutes // 60}:{minutes % 60:02d}"


def battery_segment(
    info: BatteryInfo | None,
    paint: Painter,
    glyphs: Glyphs,
    placeholder: bool = True,
) -> Segment:
    """
    Show the battery's charge level between angle brackets: nothing when it's
    (nearly) full, the gauge when it's above `GAUGE_THRESHOLD`, and the time
    left when it's at or below it.  If there is no battery information, the
    brackets are shown empty, or omitted entirely if ``placeholder`` is false.
    """
    empty = glyphs.langle + glyphs.rangle
    if info is None:
        return empty if placeholder else EMPTY
    if info.percent > 99:
        return empty
    elif info.percent > GAUGE_THRESHOLD:
        content = Segment.from_colored(info.colored_gauge, paint)
    elif info.time_left.total_seconds() > 0:
        content = Segment.painted(
            format_time_left(info.time_left),
            paint,
            (
                SC.BATTERY_CRITICAL
                if info.percent <= CRITICAL_THRESHOLD
                else SC.BATTERY_LOW
            ),
        )
    else:
        # The battery command sometimes reports no time left at all.
        return empty
    return glyphs.langle + content + glyphs.rangle
