from __future__ import annotations
from datetime import datetime
from pathlib import Path
import subprocess
from typing import Any
import pytest
from twoline_ps1 import info
from twoline_ps1.cpu import CPUInfo
from twoline_ps1.info import (
    check_enabled,
    clock_segment,
    credential_segment,
    cwd_segment,
    exit_code_segment,
    home_relative,
    host_segment,
    jobs_segment,
    kerberos_segment,
    midway_segment,
    parse_df,
    username_segment,
)
from twoline_ps1.layout import EMPTY
from twoline_ps1.styles import DARK_THEME, ANSIStyler, Painter
from twoline_ps1.styles import StyleClass as SC

PAINT = Painter(ANSIStyler(), DARK_THEME)

DF_HEADER = "Filesystem     1024-blocks      Used Available Capacity Mounted on\n"


def completed(
    stdout: str = "", returncode: int = 0
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


@pytest.mark.parametrize(
    "name,rendered",
    [
        ("alice", "\x1B[36malice\x1B[m"),
        ("root", "\x1B[93mroot\x1B[m"),
        (None, "\x1B[91m!user!\x1B[m"),
    ],
)
def test_username_segment(name: str | None, rendered: str) -> None:
    assert username_segment(name, PAINT).decorated == rendered


@pytest.mark.parametrize(
    "running,suspended,rendered",
    [
        (False, False, "\x1B[36m@\x1B[m"),
        (True, False, "\x1B[92;1m@\x1B[m"),
        (False, True, "\x1B[91;1m@\x1B[m"),
        (True, True, "\x1B[91;1m@\x1B[m"),
    ],
)
def test_jobs_segment(running: bool, suspended: bool, rendered: str) -> None:
    s = jobs_segment(running, suspended, PAINT)
    assert s.plain == "@"
    assert s.decorated == rendered


@pytest.mark.parametrize(
    "load1,rendered",
    [
        (0.5, "\x1B[36mbox\x1B[m"),
        (1.5, "\x1B[93;1mbox\x1B[m"),
        (2.5, "\x1B[95;1mbox(2.50)\x1B[m"),
        (3.5, "\x1B[91;1mbox(3.50)\x1B[m"),
        (4.0, "\x1B[91;1mbox(4.00)\x1B[m"),
        (4.25, "\x1B[97;41;1mbox(4.25)\x1B[m"),
    ],
)
def test_host_segment(load1: float, rendered: str) -> None:
    cpu = CPUInfo(processors=4, load1=load1)
    assert host_segment("box", cpu, PAINT).decorated == rendered


def test_host_segment_unknown_processors() -> None:
    cpu = CPUInfo(processors=0, load1=12.0)
    assert host_segment("box", cpu, PAINT).plain == "box"


def test_get_hostname_pretty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "run", lambda *_args: completed("Pretty Box\n"))
    assert info.get_hostname() == "Pretty Box"


def test_get_hostname_colored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "run", lambda *_args: completed("\x1B[35mbox\x1B[m\n"))
    assert info.get_hostname() == "box"
    s = host_segment(info.get_hostname(), CPUInfo(processors=1), PAINT)
    assert s.plain == "box"


def test_get_hostname_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "run", lambda *_args: None)
    monkeypatch.setattr(info.socket, "gethostname", lambda: "box")
    assert info.get_hostname() == "box"


@pytest.mark.parametrize(
    "path,short",
    [
        ("/home/alice", "~"),
        ("/home/alice/proj", "~/proj"),
        ("/home/alicebob/proj", "/home/alicebob/proj"),
        ("/var/lib/data", "/var/lib/data"),
    ],
)
def test_home_relative(path: str, short: str) -> None:
    assert home_relative(path, Path("/home/alice")) == short


@pytest.mark.parametrize(
    "output,result",
    [
        (DF_HEADER + "/dev/sda1 100 50 50 50% /\n", ("", SC.CWD)),
        (DF_HEADER + "/dev/sda1 100 71 29 71% /\n", ("", SC.DISK_WARN)),
        (DF_HEADER + "/dev/sda1 100 81 19 81% /\n", ("", SC.DISK_HIGH)),
        (DF_HEADER + "/dev/sda1 100 91 9 91% /\n", ("", SC.DISK_FULL)),
        (DF_HEADER + "/dev/sda1 100 90 10 90% /\n", ("", SC.DISK_HIGH)),
        (DF_HEADER + "/dev/sda1 100 - - -% /\n", ("=", SC.DF_BAD_PERCENT)),
        (DF_HEADER + "/dev/sda1 100\n", ("+", SC.DF_BAD_LINE)),
        (DF_HEADER, ("~", SC.DF_NO_OUTPUT)),
        ("", ("~", SC.DF_NO_OUTPUT)),
    ],
)
def test_parse_df(output: str, result: tuple[str, SC]) -> None:
    assert parse_df(output) == result


def test_cwd_segment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "dir_status", lambda _: ("", SC.CWD))
    s = cwd_segment(Path("/home/alice/proj"), Path("/home/alice"), 80, PAINT)
    assert s.plain == "~/proj"
    assert s.decorated == "\x1B[92m~/proj\x1B[m"


def test_cwd_segment_truncated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "dir_status", lambda _: ("", SC.CWD))
    s = cwd_segment(
        Path("/home/alice/src/project/subdir"), Path("/home/alice"), 10, PAINT
    )
    assert s.plain == "…ct/subdir"


def test_cwd_segment_marker_fits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "dir_status", lambda _: ("!", SC.DF_FAILED))
    s = cwd_segment(Path("/var/lib/something"), Path("/home/alice"), 10, PAINT)
    assert s.plain == "!…mething!"
    assert s.decorated == "\x1B[95;1m!…mething!\x1B[m"


def test_cwd_segment_missing() -> None:
    s = cwd_segment(None, Path("/home/alice"), 80, PAINT)
    assert s.plain == "<missing>"
    assert s.decorated == "\x1B[91;1;5m<missing>\x1B[m"


def test_cwd_segment_formatter(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_run(*args: str, **kwargs: object) -> subprocess.CompletedProcess[str]:
        calls.append(args)
        return completed("/home/alice/P\n")

    monkeypatch.setattr(info, "run", fake_run)
    monkeypatch.setattr(info, "dir_status", lambda _: ("", SC.CWD))
    s = cwd_segment(
        Path("/home/alice/proj"),
        Path("/home/alice"),
        80,
        PAINT,
        wd_format="shorten --style 'a b'",
    )
    assert s.plain == "~/P"
    assert calls == [("shorten", "--style", "a b", "/home/alice/proj")]


def test_cwd_segment_formatter_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "run", lambda *_args, **_kwargs: completed("", 1))
    monkeypatch.setattr(info, "dir_status", lambda _: ("", SC.CWD))
    s = cwd_segment(
        Path("/home/alice/proj"), Path("/home/alice"), 80, PAINT, wd_format="fmt"
    )
    assert s.plain == "~/proj"


def test_cwd_segment_colored_formatter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        info, "run", lambda *_args, **_kwargs: completed("\x1B[34m~/proj\x1B[m\n")
    )
    monkeypatch.setattr(info, "dir_status", lambda _: ("", SC.CWD))
    s = cwd_segment(
        Path("/home/alice/proj"), Path("/home/alice"), 80, PAINT, wd_format="fmt"
    )
    assert s.plain == "~/proj"
    assert s.decorated == "\x1B[92m~/proj\x1B[m"


def test_cwd_segment_escape_in_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "dir_status", lambda _: ("", SC.CWD))
    s = cwd_segment(Path("/tmp/odd\x1B[1mname"), Path("/home/alice"), 80, PAINT)
    assert s.plain == "/tmp/oddname"
    assert s.decorated == "\x1B[92m/tmp/oddname\x1B[m"


def test_dir_status_readonly(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info.os, "access", lambda *_args: False)
    assert info.dir_status(tmp_path) == ("", SC.CWD_READONLY)


def test_dir_status_df_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info.os, "access", lambda *_args: True)
    monkeypatch.setattr(info, "run", lambda *_args, **_kwargs: None)
    assert info.dir_status(tmp_path) == ("!", SC.DF_FAILED)


def test_dir_status_df(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info.os, "access", lambda *_args: True)
    monkeypatch.setattr(
        info,
        "run",
        lambda *_args, **_kwargs: completed(DF_HEADER + "/dev/x 10 8 2 85% /\n"),
    )
    assert info.dir_status(tmp_path) == ("", SC.DISK_HIGH)


def test_clock_segment() -> None:
    s = clock_segment(datetime(2024, 3, 9, 7, 5, 59), PAINT)
    assert s.plain == "07:05"
    assert s.decorated == "\x1B[33m07:05\x1B[m"


def test_exit_code_segment() -> None:
    assert exit_code_segment(0, PAINT) == EMPTY
    s = exit_code_segment(137, PAINT)
    assert s.plain == " :137:"
    assert s.decorated == "\x1B[91m :137:\x1B[m"


def test_credential_segment() -> None:
    assert credential_segment("K", True, PAINT) == EMPTY
    s = credential_segment("K", False, PAINT)
    assert s.plain == " [K]"
    assert s.decorated == "\x1B[91;1m [K]\x1B[m"


def test_check_enabled(tmp_path: Path) -> None:
    assert not check_enabled(tmp_path, "kerberos")
    (tmp_path / ".host" / "config").mkdir(parents=True)
    (tmp_path / ".host" / "config" / "check_kerberos").touch()
    assert check_enabled(tmp_path, "kerberos")
    assert not check_enabled(tmp_path, "midway")


def test_check_enabled_unreadable(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    real_stat = Path.stat

    def stat(self: Path, *args: Any, **kwargs: Any) -> Any:
        if ".host" in self.parts:
            raise PermissionError(13, "Permission denied", str(self))
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, "stat", stat)
    assert not check_enabled(tmp_path, "kerberos")


def test_kerberos_segment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "run", lambda *_args: completed(returncode=1))
    assert kerberos_segment(False, PAINT) == EMPTY
    assert kerberos_segment(True, PAINT).plain == " [K]"
    monkeypatch.setattr(info, "run", lambda *_args: completed())
    assert kerberos_segment(True, PAINT) == EMPTY


def test_kerberos_segment_no_klist(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(info, "run", lambda *_args: None)
    assert kerberos_segment(True, PAINT).plain == " [K]"


@pytest.mark.parametrize(
    "stdout,returncode,plain",
    [
        ("cert ok\n", 0, ""),
        ("", 0, " [M]"),
        ("expired\n", 1, " [M]"),
    ],
)
def test_midway_segment(
    monkeypatch: pytest.MonkeyPatch, stdout: str, returncode: int, plain: str
) -> None:
    monkeypatch.setattr(info, "run", lambda *_args: completed(stdout, returncode))
    assert midway_segment(True, PAINT).plain == plain
