"""Output helpers for chanlog.

One helper per channel so call sites read like the channel they target:

    log_err("bad value %d", value)      # Log.err + stderr
    log_warn("retrying %s", name)       # Log.warn + stderr
    log_scrn("progress %d%%", pct)      # stdout only
    log_note("loaded %d items", n)      # Log.log + stdout
    log_file("state: %r", state)        # Log.file only

All helpers write through the process-wide Logger from get_log(), so the
first use creates the default Log.* files unless init_log() ran first.

Also re-exports the log_lib public API for convenience imports.
"""

import sys

# Re-export log_lib public API — one-stop import for callers
from chanlog.lib.log_lib import (                     # noqa: F401
    Logger, init_log, get_log, reset_log,
    ChannelKind, config_of, parse_channel_kind,
    failure_handler, check, CheckFailedError,
)


def log_err(template, *args):
    """Write to the ERROR channel."""
    get_log().write(ChannelKind.ERROR, template, *args)


def log_warn(template, *args):
    """Write to the WARNING channel."""
    get_log().write(ChannelKind.WARNING, template, *args)


def log_scrn(template, *args):
    """Write to the SCREEN channel."""
    get_log().write(ChannelKind.SCREEN, template, *args)


def log_note(template, *args):
    """Write to the NOTE channel."""
    get_log().write(ChannelKind.NOTE, template, *args)


def log_file(template, *args):
    """Write to the FILE channel."""
    get_log().write(ChannelKind.FILE, template, *args)


def print_ok(msg):
    """Print a success message."""
    print(f"  [OK] {msg}")


def print_error(msg):
    """Print a CLI usage error to stderr.

    Not routed through the ERROR channel: usage errors happen before the
    log is configured and must not create log files.
    """
    print(f"  ERROR: {msg}", file=sys.stderr)
