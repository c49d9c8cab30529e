from __future__ import annotations
import argparse
import logging
from . import __url__, __version__
from .prompt import RenderContext, render
from .styles import THEMES


def main() -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Two-line, terminal-width-aware shell status line."
            f"  Visit <{__url__}> for more information."
        )
    )
    parser.add_argument(
        "-b",
        "--show-battery",
        action="store_true",
        help="Show the laptop battery status",
    )
    parser.add_argument(
        "--no-battery-placeholder",
        action="store_false",
        dest="battery_placeholder",
        help="Omit the empty battery brackets when no battery status is shown",
    )
    parser.add_argument(
        "-c",
        "--color",
        action="store_true",
        default=None,
        help="Force colored output  [default: color iff stdout is a terminal]",
    )
    parser.add_argument(
        "--check-kerberos",
        action="store_true",
        help="Warn if there is no Kerberos ticket",
    )
    parser.add_argument(
        "--check-midway",
        action="store_true",
        help="Warn if there is no Midway certificate",
    )
    parser.add_argument(
        "-d",
        "--dir",
        metavar="PATH",
        help=(
            "The working directory to pretend we're in.  Tilde expansion is"
            " best-effort."
        ),
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log diagnostics about failed status checks to stderr",
    )
    parser.add_argument(
        "-e",
        "--exit-code",
        type=int,
        default=0,
        metavar="N",
        help="The exit code of the previously run command  [default: 0]",
    )
    parser.add_argument(
        "-g",
        "--vcs",
        metavar="COMMAND",
        help=(
            "Command to run that outputs VCS information; an empty string"
            " disables VCS support  [default: built-in Git support]"
        ),
    )
    parser.add_argument(
        "--git-timeout",
        type=float,
        metavar="SECONDS",
        default=3,
        help=(
            "Disable Git integration if `git status` runtime exceeds timeout"
            "  [default: 3]"
        ),
    )
    parser.add_argument(
        "-p",
        "--wd-format",
        metavar="COMMAND",
        help=(
            "Pass the working directory through this command for additional"
            " formatting"
        ),
    )
    parser.add_argument(
        "-r",
        "--running-jobs",
        action="store_true",
        help="The shell has background jobs running",
    )
    parser.add_argument(
        "-s",
        "--suspended-jobs",
        action="store_true",
        help="The shell has suspended background jobs",
    )
    parser.add_argument(
        "-T",
        "--theme",
        choices=list(THEMES.keys()),
        default="dark",
        help="Select the color theme to use  [default: dark]",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=int,
        metavar="COLUMNS",
        help="Override the detected terminal width",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()
    logging.basicConfig(
        format="%(name)s: [%(levelname)-8s] %(message)s",
        level=logging.DEBUG if args.debug else logging.CRITICAL,
    )
    ctx = RenderContext.create(
        theme=THEMES[args.theme],
        width=args.width,
        color=args.color,
        workdir=args.dir,
        check_kerberos=args.check_kerberos,
        check_midway=args.check_midway,
        exit_code=args.exit_code,
        running_jobs=args.running_jobs,
        suspended_jobs=args.suspended_jobs,
        show_battery=args.show_battery,
        battery_placeholder=args.battery_placeholder,
        vcs_command=args.vcs,
        git_timeout=args.git_timeout,
        wd_format=args.wd_format,
    )
    for line in render(ctx):
        print(line.decorated)


if __name__ == "__main__":
    main()
