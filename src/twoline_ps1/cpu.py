from __future__ import annotations
from dataclasses import dataclass
import logging
from pathlib import Path
import re
from .util import cat

log = logging.getLogger(__name__)

PROC_STAT = Path("/proc/stat")
PROC_LOADAVG = Path("/proc/loadavg")


@dataclass
class CPUInfo:
    #: The number of processors listed in :file:`/proc/stat`, or 0 if unknown
    processors: int = 0

    #: The one-minute load average
    load1: float = 0.0

    #: The five-minute load average
    load5: float = 0.0

    @property
    def load1_pct(self) -> float:
        """
        The one-minute load average as a fraction of the number of processors
        (so that 1.0 means "fully loaded"), or 0 if the number of processors is
        unknown
        """
        return self.load1 / self.processors if self.processors > 0 else 0.0

    @property
    def load5_pct(self) -> float:
        return self.load5 / self.processors if self.processors > 0 else 0.0

    @classmethod
    def get(cls, stat: Path = PROC_STAT, loadavg: Path = PROC_LOADAVG) -> CPUInfo:
        """
        Read processor & load information from the :file:`/proc` filesystem.
        Anything that can't be read is left at zero.
        """
        info = cls()
        if (s := cat(stat)) is not None:
            info.processors = sum(
                1 for line in s.splitlines() if re.match(r"cpu\d+\s", line)
            )
        if (s := cat(loadavg)) is not None:
            try:
                load1, load5 = s.split()[:2]
                info.load1 = float(load1)
                info.load5 = float(load5)
            except ValueError as e:
                log.debug("Could not parse %s: %s", loadavg, e)
        return info
