"""
Failure reporting for checks and assertions.

failure_handler() is the hook an assertion facility calls when a check
fails. It records the failure on the ERROR channel and then either
raises (fatal) or returns False so the caller can use it as a guard:

    if not check(count > 0, "count > 0"):
        return

The report is formatted in memory and written through Logger.write()
only. It never configures or opens log files, so a failure to open the
error log (which is itself reported here) cannot recurse.
"""

import inspect
import os
import sys
from typing import Optional

from .channels import ChannelKind

DEBUG_BREAK_ENV = "CHANLOG_DEBUG_BREAK"

# Debugger modules whose presence means a debugger is attached
_DEBUGGER_MODULES = ("pydevd", "debugpy")


class CheckFailedError(Exception):
    """A fatal check failed. The message is the logged failure report."""


def debugger_attached() -> bool:
    """True if a debugger is attached or debug breaks are forced."""
    if os.environ.get(DEBUG_BREAK_ENV):
        return True
    return any(name in sys.modules for name in _DEBUGGER_MODULES)


def debug_break() -> None:
    """Break into the debugger if one is attached."""
    if debugger_attached():
        breakpoint()


def failure_handler(expr: str, filename: str, lineno: int,
                    fatal: bool = False, log=None) -> bool:
    """Report a failed check on the ERROR channel.

    Args:
        expr: Text of the failed expression
        filename: Source file of the check
        lineno: Source line of the check
        fatal: If True, raise CheckFailedError after logging
        log: Logger to report to; defaults to the process-wide log

    Returns:
        False, so the call can be used directly as a guard

    Raises:
        CheckFailedError: If fatal is True
    """
    debug_break()

    message = f"Failed check '{expr}' in {filename} line {lineno}\n"
    if log is None:
        # Lazy import to avoid circular dependency
        from .manager import get_log
        log = get_log()

    log.write(ChannelKind.ERROR, message)

    if fatal:
        raise CheckFailedError(message.rstrip('\n'))
    return False


def check(condition, expr: Optional[str] = None, fatal: bool = False,
          log=None) -> bool:
    """Return True if condition holds, otherwise report the failure.

    The caller's file and line are recorded in the report. expr defaults
    to the source text of the calling line.
    """
    if condition:
        return True
    caller = inspect.stack(context=1)[1]
    if expr is None:
        context = caller.code_context
        expr = context[0].strip() if context else "<unknown>"
    return failure_handler(expr, caller.filename, caller.lineno,
                           fatal=fatal, log=log)
