"""chanlog write — write messages to a log channel from the shell.

Each MESSAGE becomes one record on the channel. With no MESSAGE (or a
single '-') every line of stdin becomes one record, which makes chanlog
usable at the end of a pipe:

    make 2>&1 | chanlog write note

Messages are written verbatim; '%' needs no escaping.
"""

import argparse
import sys

from chanlog.config import resolve_config
from chanlog.lib.log_lib import init_log, parse_channel_kind
from chanlog.output import print_error


def register(subparsers, parents):
    """Register the 'write' subcommand."""
    p = subparsers.add_parser(
        "write",
        parents=parents,
        help="Write messages to a log channel",
        description=(
            "Write one record per MESSAGE to CHANNEL (error, warning,\n"
            "screen, note, file). Reads stdin lines when no MESSAGE is given."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("channel", metavar="CHANNEL",
                   help="Target channel name or alias (err, warn, scrn, note, file)")
    p.add_argument("message", metavar="MESSAGE", nargs="*",
                   help="Message text; '-' or nothing reads stdin")
    p.set_defaults(func=run)


def _iter_messages(args):
    if args.message and args.message != ["-"]:
        yield from args.message
        return
    for line in sys.stdin:
        yield line.rstrip("\r\n")


def run(args):
    """Execute the write command."""
    try:
        kind = parse_channel_kind(args.channel)
    except ValueError as e:
        print_error(str(e))
        return 2

    settings = resolve_config(args)
    log = init_log(
        settings["base_path"],
        viewer=settings["viewer"],
        launch_viewer=settings["launch_viewer"],
    )
    if settings["status"]:
        log.set_status(str(settings["status"]))

    for message in _iter_messages(args):
        log.write(kind, message)

    log.shutdown()
    return 0
