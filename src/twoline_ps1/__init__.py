"""
Two-line, terminal-width-aware shell status line

``twoline-ps1`` prints a pair of lines to show above your shell prompt, each
exactly as wide as the terminal:

- the current user (highlighted when root), whether the shell has background
  jobs, and the hostname, colored by the current CPU load
- the current directory, shortened at the front if it doesn't fit and colored
  by whether it's writable & how full its filesystem is
- the time, optional laptop battery status, Kerberos ticket & Midway
  certificate warnings, and the exit code of the last command if nonzero
- the current VCS branch and a summary of changed files

Built on <https://github.com/jwodder/ps1.py>.
"""

__version__ = "0.1.0"
__author__ = "John Thorvald Wodder II"
__author_email__ = "ps1@varonathe.org"
__license__ = "MIT"
__url__ = "https://github.com/jwodder/ps1.py"
