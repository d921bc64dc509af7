"""chanlog channels — list the log channels and their routing."""

from chanlog.lib.log_lib import format_channel_list


def register(subparsers, parents):
    """Register the 'channels' subcommand."""
    p = subparsers.add_parser(
        "channels",
        parents=parents,
        help="List log channels with their file and stream routing",
    )
    p.set_defaults(func=run)


def run(args):
    """Execute the channels command."""
    print(format_channel_list())
    return 0
