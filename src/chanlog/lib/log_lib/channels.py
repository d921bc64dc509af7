"""
Channel table for the multi-channel diagnostic log.

Channels are the fixed output destinations of the log. Each channel has
an immutable configuration: the extension of its backing file (or none),
a header written in front of every message, the standard stream it
echoes to, and whether it carries the current status prefix.

Channel table:

    kind      ext    header       stream   status
    ERROR     err    "Error: "    stderr   yes
    WARNING   warn   "Warning: "  stderr   yes
    SCREEN    -      ""           stdout   no
    NOTE      log    ""           stdout   no
    FILE      file   ""           -        yes

Channel names on the command line are case-insensitive and accept the
short aliases err, warn, scrn, note, file.
"""

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


class ChannelKind(enum.Enum):
    """The closed set of log channels."""
    ERROR = 'error'
    WARNING = 'warning'
    SCREEN = 'screen'
    NOTE = 'note'
    FILE = 'file'


class StreamTarget(enum.Enum):
    """Standard stream a channel echoes to."""
    ERROR_STREAM = 'stderr'
    OUTPUT_STREAM = 'stdout'
    NO_STREAM = None


@dataclass(frozen=True)
class ChannelConfig:
    """Immutable configuration for a single channel.

    Attributes:
        extension: Backing file extension without the dot; None if the
            channel has no file
        header: Text written in front of every message
        destination: Standard stream the message is echoed to
        uses_status_prefix: True if the current status is prepended
        description: One-line description for channel listings
    """
    extension: Optional[str]
    header: str
    destination: StreamTarget
    uses_status_prefix: bool
    description: str = ''

    @property
    def has_file(self) -> bool:
        return self.extension is not None


CHANNEL_CONFIGS: Mapping[ChannelKind, ChannelConfig] = MappingProxyType({
    ChannelKind.ERROR: ChannelConfig(
        'err', 'Error: ', StreamTarget.ERROR_STREAM, True,
        'Error file and stderr'),
    ChannelKind.WARNING: ChannelConfig(
        'warn', 'Warning: ', StreamTarget.ERROR_STREAM, True,
        'Warning file and stderr'),
    ChannelKind.SCREEN: ChannelConfig(
        None, '', StreamTarget.OUTPUT_STREAM, False,
        'stdout only'),
    ChannelKind.NOTE: ChannelConfig(
        'log', '', StreamTarget.OUTPUT_STREAM, False,
        'Log file and stdout'),
    ChannelKind.FILE: ChannelConfig(
        'file', '', StreamTarget.NO_STREAM, True,
        'Log file only'),
})

# Short names accepted in addition to the full channel names
CHANNEL_ALIASES = {
    'err': ChannelKind.ERROR,
    'warn': ChannelKind.WARNING,
    'scrn': ChannelKind.SCREEN,
    'note': ChannelKind.NOTE,
    'file': ChannelKind.FILE,
}


def config_of(kind: ChannelKind) -> ChannelConfig:
    """Return the fixed configuration of a channel."""
    return CHANNEL_CONFIGS[kind]


def parse_channel_kind(name: str) -> ChannelKind:
    """Parse a channel name into a ChannelKind.

    Args:
        name: Channel name or alias, any case (e.g. "Error", "warn")

    Returns:
        The matching ChannelKind

    Raises:
        ValueError: If the name is not a known channel
    """
    key = name.strip().lower()
    if key in CHANNEL_ALIASES:
        return CHANNEL_ALIASES[key]
    try:
        return ChannelKind(key)
    except ValueError:
        valid = ', '.join(kind.value for kind in ChannelKind)
        raise ValueError(
            f"Unknown channel '{name}' (expected one of: {valid})") from None


def format_channel_list() -> str:
    """Format the channel table for display.

    Returns:
        Formatted string listing all channels with their routing.
    """
    lines = ["Available channels:"]
    max_name = max(len(kind.value) for kind in ChannelKind)
    for kind in ChannelKind:
        cfg = CHANNEL_CONFIGS[kind]
        ext = f".{cfg.extension}" if cfg.has_file else "-"
        stream = cfg.destination.value or "-"
        status = " (status)" if cfg.uses_status_prefix else ""
        lines.append(f"  {kind.value:<{max_name}}  {ext:<6} {stream:<7} "
                     f"{cfg.description}{status}")
    return "\n".join(lines)
