"""
Fire-and-forget process launching.

Used by the Logger at shutdown to open the error log in a viewer. The
launcher never waits for the child and never reports its outcome: a
missing viewer must not turn a clean shutdown into a crash.
"""

import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Union

VIEWER_ENV = "CHANLOG_VIEWER"


def default_viewer():
    """Return the command used to display a log file.

    Honors CHANLOG_VIEWER, then falls back to the platform text viewer.
    """
    viewer = os.environ.get(VIEWER_ENV, "").strip()
    if viewer:
        return viewer
    if sys.platform == "win32":
        return "notepad.exe"
    if sys.platform == "darwin":
        return "open -t"
    return "xdg-open"


def viewer_command(viewer: str, path: Union[str, Path]) -> str:
    """Build the command line that opens path in viewer."""
    return f'{viewer} "{path}"'


def start_process(command_line: str) -> None:
    """Start command_line as a detached process and return immediately.

    Args:
        command_line: Full command line, e.g. 'notepad.exe "Log.err"'
    """
    try:
        args = shlex.split(command_line, posix=(os.name != "nt"))
    except ValueError:
        return
    if not args:
        return

    kwargs = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
    }
    if os.name == "nt":
        kwargs["creationflags"] = (subprocess.DETACHED_PROCESS
                                   | subprocess.CREATE_NEW_PROCESS_GROUP)
    else:
        kwargs["start_new_session"] = True

    try:
        subprocess.Popen(args, **kwargs)
    except (OSError, ValueError):
        pass
