from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
import logging
import os
from pathlib import Path
import re
import shlex
from .layout import EMPTY, Segment
from .styles import Painter
from .styles import StyleClass as SC
from .util import run

log = logging.getLogger(__name__)

#: Default maximum display length of the repository HEAD
MAX_HEAD_LEN = 15

#: Indentation placed before the branch on the second line of the prompt
BRANCH_INDENT = "   "

#: The file status letters (as shown by ``git status --short``) that are
#: counted in the file summary, in display order, together with the symbol
#: each is displayed as and its style
FILE_STATUSES: list[tuple[str, str, SC]] = [
    ("M", "M", SC.GIT_MODIFIED),
    ("A", "+", SC.GIT_ADDED),
    ("D", "-", SC.GIT_DELETED),
    ("R", "R", SC.GIT_RENAMED),
    ("C", "C", SC.GIT_COPIED),
    ("U", "U", SC.GIT_UPDATED),
    ("?", "?", SC.GIT_FILES_UNTRACKED),
    ("!", "!", SC.GIT_IGNORED),
]


@dataclass
class VCSInfo:
    """The two halves of the VCS portion of the prompt's second line"""

    #: Left-aligned: the current branch and its state
    branch: Segment

    #: Right-aligned: a summary of changed files
    files: Segment


def external_vcs_info(
    command: str, workdir: str | os.PathLike[str], paint: Painter
) -> VCSInfo | None:
    """
    Run an external VCS status command in ``workdir`` and use the first two
    lines of its (already colored) output as the branch & file summary.  If
    the command fails or prints fewer than two lines, return `None`.
    """
    try:
        argv = shlex.split(command)
    except ValueError as e:
        log.debug("Invalid VCS command %r: %s", command, e)
        return None
    if not argv:
        return None
    r = run(*argv, "--output=prompt", "--color", "--vcs=git", cwd=workdir)
    if r is None or r.returncode != 0:
        return None
    lines = r.stdout.split("\n")
    if len(lines) < 2:
        log.debug("VCS command %r printed too few lines", command)
        return None
    return VCSInfo(
        branch=Segment.from_colored(BRANCH_INDENT + lines[0].strip(), paint),
        files=Segment.from_colored(lines[1].strip(), paint),
    )


@dataclass
class GitStatus:
    #: A description of the repository's ``HEAD``: either the name of the
    #: current branch (if any), or the name of the currently checked-out tag
    #: (if any), or the short form of the current commit hash
    head: str

    #: `True` iff the repository is in a detached ``HEAD`` state
    detached: bool

    #: The number of commits by which ``HEAD`` is ahead of ``@{upstream}``, or
    #: `None` if there is no upstream
    ahead: int | None

    #: The number of commits by which ``HEAD`` is behind ``@{upstream}``, or
    #: `None` if there is no upstream
    behind: int | None

    #: Status of the repository's worktree; this is non-`None` iff the
    #: repository is not a bare repository
    wkt: WorkTreeStatus | None

    def branch_style(self) -> SC:
        """
        Pick the branch color from the most pressing condition of the
        repository
        """
        if (wkt := self.wkt) is not None:
            if wkt.conflict or wkt.state is not None:
                return SC.GIT_CONFLICT
            elif wkt.untracked:
                return SC.GIT_UNTRACKED
            elif wkt.unstaged:
                return SC.GIT_UNSTAGED
            elif wkt.staged:
                return SC.GIT_STAGED
        if self.ahead:
            return SC.GIT_AHEAD
        return SC.GIT_CLEAN

    def display(self, paint: Painter) -> VCSInfo:
        branch = Segment(BRANCH_INDENT, BRANCH_INDENT)
        branch += Segment.painted(shorthead(self.head), paint, self.branch_style())
        if self.ahead:
            # Show commits ahead of upstream:
            branch += Segment.painted(f"+{self.ahead}", paint, SC.GIT_AHEAD)
            if self.behind:
                # Ahead/behind separator:
                branch += Segment(",", ",")
        if self.behind:
            # Show commits behind upstream:
            branch += Segment.painted(f"-{self.behind}", paint, SC.GIT_BEHIND)
        if self.wkt is not None and self.wkt.state is not None:
            # The repository is in the middle of something special:
            branch += Segment.painted(
                "[" + self.wkt.state.value + "]", paint, SC.GIT_STATE
            )
        files = EMPTY
        if self.wkt is not None:
            for letter, symbol, klass in FILE_STATUSES:
                if count := self.wkt.counts[letter]:
                    if files:
                        files += Segment(" ", " ")
                    files += Segment.painted(f"{symbol}:{count}", paint, klass)
        return VCSInfo(branch=branch, files=files)


@dataclass
class WorkTreeStatus:
    #: `True` iff there are changes staged to be committed
    staged: bool = False

    #: `True` iff there are unstaged changes in the working tree
    unstaged: bool = False

    #: `True` iff there are untracked files in the working tree
    untracked: bool = False

    #: `True` iff there are any paths in the working tree with merge conflicts
    conflict: bool = False

    #: The current state of the working tree, or `None` if there are no
    #: rebases/bisections/etc. currently in progress
    state: GitState | None = None

    #: The number of paths carrying each status letter in either column of
    #: the short status
    counts: Counter[str] = field(default_factory=Counter)

    def add_status_line(self, line: str) -> None:
        """Update the status with one line of ``git status --porcelain``"""
        xy = line[:2]
        for letter in set(xy):
            self.counts[letter] += 1
        if xy == "??":
            self.untracked = True
        elif xy != "!!":
            if "U" in xy or xy in ("AA", "DD"):
                self.conflict = True
            else:
                if xy[0] != " ":
                    self.staged = True
                if xy[1] in "DM":
                    self.unstaged = True


class GitState(Enum):
    """
    Represents the various "in progress" states that a Git repository can be
    in.  The value of each enumeration is a short string for displaying in a
    command prompt.
    """

    REBASE_MERGING = "REBAS"
    REBASE_APPLYING = "REBAS"
    MERGING = "MERGE"
    CHERRY_PICKING = "CHYPK"
    REVERTING = "REVRT"
    BISECTING = "BSECT"

    @classmethod
    def detect(cls, git_dir: Path) -> GitState | None:
        if (git_dir / "rebase-merge").is_dir():
            return cls.REBASE_MERGING
        elif (git_dir / "rebase-apply").is_dir():
            return cls.REBASE_APPLYING
        elif (git_dir / "MERGE_HEAD").is_file():
            return cls.MERGING
        elif (git_dir / "CHERRY_PICK_HEAD").is_file():
            return cls.CHERRY_PICKING
        elif (git_dir / "REVERT_HEAD").is_file():
            return cls.REVERTING
        elif (git_dir / "BISECT_LOG").is_file():
            return cls.BISECTING
        else:
            return None


BRANCH_LINE_RE = re.compile(
    r"""
    \#\#\s*(?:(?:Initial commit|No commits yet) on )?
    (?P<branch>(?:[^\s.]|\.(?!\.))+)
    (?:\.\.\.\S+
        (?:
            \s*\[
                (?:ahead\s*(?P<ahead>\d+))?
                (?:(?(ahead)[,\s]+)behind\s*(?P<behind>\d+))?
            \]
        )?
    )?\s*
    """,
    flags=re.X,
)


def git_status(workdir: str | os.PathLike[str], timeout: float = 3) -> GitStatus | None:
    """
    If ``workdir`` is in a Git repository, ``git_status()`` returns a
    `GitStatus` instance describing the repository's current state.

    If ``workdir`` is not in a Git repository, or if Git is not installed, or
    if the runtime of the ``git status`` command exceeds ``timeout``,
    ``git_status()`` returns `None`.

    This function is based on a combination of Git's `git-prompt.sh`__ and
    magicmonty's bash-git-prompt__.

    __ https://github.com/git/git/blob/master/contrib/completion/git-prompt.sh
    __ https://github.com/magicmonty/bash-git-prompt/blob/master/gitstatus.py
    """

    git_dir_str = git("rev-parse", "--git-dir", cwd=workdir)
    if git_dir_str is None:
        return None
    git_dir = Path(workdir, git_dir_str)

    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8").strip()
    except OSError as e:
        log.debug("Could not read HEAD of %s: %s", git_dir, e)
        return None
    if head.startswith("ref: "):
        head = re.sub(r"^(ref: )?(refs/heads/)?", "", head)
        detached = False
    else:
        head = (
            git("describe", "--tags", "--exact-match", "HEAD", cwd=workdir)
            or git("rev-parse", "--short", "HEAD", cwd=workdir)
            or head[:7]
        )
        detached = True

    ahead: int | None = None
    behind: int | None = None
    bare = (
        git("rev-parse", "--is-bare-repository", cwd=workdir) == "true"
        or git("rev-parse", "--is-inside-work-tree", cwd=workdir) == "false"
    )
    # Note: The latter condition above actually means that we're inside a .git
    # directory, but that's similar enough to a bare repo that no one will
    # care.
    if bare:
        delta = git(
            "rev-list", "--count", "--left-right", "@{upstream}...HEAD", cwd=workdir
        )
        if delta is not None:
            behind, ahead = map(int, delta.split())
        return GitStatus(
            head=head, detached=detached, ahead=ahead, behind=behind, wkt=None
        )

    r = run("git", "status", "--porcelain", "--branch", cwd=workdir, timeout=timeout)
    if r is None or r.returncode != 0:
        return None

    wkt = WorkTreeStatus(state=GitState.detect(git_dir))
    for line in r.stdout.strip("\n").splitlines():
        if line.startswith("##"):
            if m := BRANCH_LINE_RE.fullmatch(line):
                if m.group("ahead") is not None:
                    ahead = int(m.group("ahead"))
                if m.group("behind") is not None:
                    behind = int(m.group("behind"))
        elif len(line) >= 2:
            wkt.add_status_line(line)

    return GitStatus(head=head, detached=detached, ahead=ahead, behind=behind, wkt=wkt)


def git(*args: str, cwd: str | os.PathLike[str] | None = None) -> str | None:
    """
    Run a Git command (suppressing stderr) and return its stdout with leading &
    trailing whitespace stripped.  If the command fails or Git is not
    installed, return `None`.
    """
    r = run("git", *args, cwd=cwd)
    if r is None or r.returncode != 0:
        return None
    return r.stdout.strip()


def shorthead(head: str, max_len: int = MAX_HEAD_LEN) -> str:
    if len(head) > max_len:
        return head[: max_len - 1] + "…"
    else:
        return head
