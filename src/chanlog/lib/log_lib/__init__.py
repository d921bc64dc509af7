"""
log_lib — multi-channel diagnostic log.

A reusable logging library providing:
- Five fixed channels (error, warning, screen, note, file) with their
  own file and stream routing
- Bounded record formatting with CRLF normalization and status prefix
- Process-wide Logger with lazy default configuration
- Error-log viewer launched at shutdown when errors were logged
- Failure reporting hook for check/assert facilities

Public API:
    Logger             — channel router and file owner
    init_log           — create the singleton explicitly
    get_log            — access singleton (created on first use)
    reset_log          — drop the singleton
    ChannelKind        — the channel enumeration
    ChannelConfig      — fixed per-channel configuration
    config_of          — channel configuration lookup
    parse_channel_kind — parse a channel name
    failure_handler    — report a failed check on the error channel
    check              — guard-style check helper
    CheckFailedError   — raised by fatal failure reports
    start_process      — fire-and-forget process launcher
"""

from .manager import Logger, init_log, get_log, reset_log, DEFAULT_LOG_BASENAME
from .channels import (
    ChannelKind, ChannelConfig, StreamTarget, CHANNEL_CONFIGS,
    config_of, parse_channel_kind, format_channel_list,
)
from .formatter import LOG_BUFFER_SIZE, MAX_STATUS_SIZE
from .failure import failure_handler, check, CheckFailedError
from .launcher import start_process, default_viewer

__all__ = [
    'Logger', 'init_log', 'get_log', 'reset_log', 'DEFAULT_LOG_BASENAME',
    'ChannelKind', 'ChannelConfig', 'StreamTarget', 'CHANNEL_CONFIGS',
    'config_of', 'parse_channel_kind', 'format_channel_list',
    'LOG_BUFFER_SIZE', 'MAX_STATUS_SIZE',
    'failure_handler', 'check', 'CheckFailedError',
    'start_process', 'default_viewer',
]
