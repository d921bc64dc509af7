"""
Logger — the multi-channel diagnostic log core.

Routes each message to one of the fixed channels. A channel writes to
its own file (Log.err, Log.warn, Log.log, Log.file), to a standard
stream, or both:

    ERROR    Log.err  + stderr     status prefix
    WARNING  Log.warn + stderr     status prefix
    SCREEN              stdout
    NOTE     Log.log  + stdout
    FILE     Log.file              status prefix

Each channel file starts with a banner line, "File created <time>", and
every record after it ends in CRLF.

Writing never raises. A channel whose file could not be opened keeps
echoing to its stream; an oversized message is cut to the record
capacity. At shutdown, if anything was written to the ERROR channel,
the error file is opened in a viewer.

Per-channel lifecycle:
    Closed --configure() [has extension, open ok]--> Open
    Open   --close() / configure()-->               Closed
"""

import atexit
import inspect
import sys
import time
from pathlib import Path
from typing import Callable, Dict, Optional, TextIO, Union

from .channels import ChannelKind, StreamTarget, config_of
from .failure import failure_handler
from .formatter import CRLF, MessageBuffer, render
from .launcher import default_viewer, start_process, viewer_command

DEFAULT_LOG_BASENAME = "Log"
BANNER = b"File created "

# Channel headers, encoded once
_HEADERS = {kind: config_of(kind).header.encode('utf-8') for kind in ChannelKind}


class ChannelState:
    """Runtime state of one channel.

    Attributes:
        file: Owned binary file, present iff the channel is open
        stream: Borrowed standard stream; never closed by the logger
        has_content: True once anything was written to the channel
        path: Derived file path; kept after close for the shutdown viewer
    """
    __slots__ = ('file', 'stream', 'has_content', 'path')

    def __init__(self, stream: Optional[TextIO] = None):
        self.file = None
        self.stream = stream
        self.has_content = False
        self.path: Optional[Path] = None

    @property
    def is_open(self) -> bool:
        return self.file is not None


class Logger:
    """Multi-channel diagnostic log.

    Normally used through the process-wide instance from get_log(), but
    can be built directly (e.g. with explicit streams for tests).

    Usage::

        log = Logger("build/Run")
        log.set_status("Loading scene")
        log.write(ChannelKind.ERROR, "bad value %d", 7)
        # build/Run.err: "Loading scene: Error: bad value 7\\r\\n"
        log.shutdown()    # opens build/Run.err in the viewer

    Not copyable: its files are owned by exactly one instance.
    """

    def __init__(
        self,
        base_path: Union[str, Path] = DEFAULT_LOG_BASENAME,
        *,
        stdout: TextIO = None,
        stderr: TextIO = None,
        launcher: Callable[[str], None] = None,
        timestamp: Callable[[], str] = None,
        viewer: str = None,
        launch_viewer: bool = True,
    ):
        self._stdout = stdout
        self._stderr = stderr
        self.launcher = launcher if launcher is not None else start_process
        self.timestamp = timestamp if timestamp is not None else time.asctime
        self.viewer = viewer
        self.launch_viewer = launch_viewer
        self._buffer = MessageBuffer()
        self._channels: Dict[ChannelKind, ChannelState] = {
            kind: ChannelState() for kind in ChannelKind
        }
        self._status = ''
        self._status_bytes = b''
        self._shut_down = False
        self.configure(base_path)

    def __copy__(self):
        raise TypeError("Logger owns its log files and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Logger owns its log files and cannot be copied")

    def __reduce__(self):
        raise TypeError("Logger owns its log files and cannot be pickled")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def configure(self, base_path: Union[str, Path]) -> None:
        """Set the base name of all channel files and (re)open them.

        The extension of base_path is ignored: each channel with a file
        gets base_path with its own extension substituted. Every open
        file is closed first, and channel state starts over (has_content
        is False again).

        A file that cannot be created is reported on the ERROR channel;
        that channel stays closed but still writes to its stream.

        Args:
            base_path: Path with a filename component, e.g. "logs/App"
        """
        self.close()
        self._channels = {
            kind: ChannelState(self._bind_stream(config_of(kind).destination))
            for kind in ChannelKind
        }

        base = Path(base_path)
        if not base.name:
            self._report(f"base path '{base_path}' has a filename")
            return

        stamp = self.timestamp().encode('ascii', 'replace')
        for kind in ChannelKind:
            cfg = config_of(kind)
            if not cfg.has_file:
                continue
            state = self._channels[kind]
            state.path = base.with_suffix('.' + cfg.extension)
            self._open(state, stamp)

    def _bind_stream(self, destination: StreamTarget) -> Optional[TextIO]:
        if destination is StreamTarget.ERROR_STREAM:
            return self._stderr if self._stderr is not None else sys.stderr
        if destination is StreamTarget.OUTPUT_STREAM:
            return self._stdout if self._stdout is not None else sys.stdout
        return None

    def _open(self, state: ChannelState, stamp: bytes) -> None:
        try:
            state.file = open(state.path, 'wb', buffering=0)
            state.file.write(BANNER + stamp + CRLF)
        except OSError as e:
            if state.file is not None:
                state.file.close()
                state.file = None
            self._report(f"open '{state.path}' for writing ({e.strerror})")

    def _report(self, expr: str) -> None:
        """Report a configuration failure against the caller's location."""
        caller = inspect.currentframe().f_back
        failure_handler(expr, caller.f_code.co_filename, caller.f_lineno,
                        fatal=False, log=self)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def write(self, kind: ChannelKind, template, *args) -> None:
        """Write one record to a channel.

        The template is rendered printf-style with args, bare LFs become
        CRLF, a CRLF terminator is added when missing, and the status
        prefix is prepended on channels that use it. The record is cut to
        the fixed capacity if needed. It is then appended to the
        channel file (if open) and echoed to the channel stream (if any).

        Args:
            kind: Target channel
            template: printf-style format string
            *args: Values for the template
        """
        cfg = config_of(kind)
        state = self._channels[kind]

        status = self._status_bytes if cfg.uses_status_prefix else b''
        record = self._buffer.compose(render(template, args), status,
                                      _HEADERS[kind])
        state.has_content = True

        if state.file is not None:
            try:
                state.file.write(record)
            except (OSError, ValueError):
                pass
        if state.stream is not None:
            _emit(state.stream, record)

    # -------------------------------------------------------------------------
    # Lifecycle and queries
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close every open channel file. Streams stay bound."""
        for state in self._channels.values():
            if state.file is None:
                continue
            try:
                state.file.close()
            except OSError:
                pass
            state.file = None

    def shutdown(self) -> None:
        """Close all files and show the error log if it has content.

        The viewer is launched fire-and-forget on the ERROR channel file.
        Safe to call more than once; only the first call acts.
        """
        if self._shut_down:
            return
        self._shut_down = True
        self.close()

        if not (self.launch_viewer and self.has_content(ChannelKind.ERROR)):
            return
        path = self.path_of(ChannelKind.ERROR)
        if path is None:
            return
        viewer = self.viewer or default_viewer()
        self.launcher(viewer_command(viewer, path))

    def has_content(self, kind: ChannelKind) -> bool:
        """True if anything was written to the channel since configure()."""
        return self._channels[kind].has_content

    def is_open(self, kind: ChannelKind) -> bool:
        """True if the channel file is currently open."""
        return self._channels[kind].is_open

    def path_of(self, kind: ChannelKind) -> Optional[Path]:
        """Path of the channel file, or None for channels without one."""
        return self._channels[kind].path

    def set_status(self, text: str) -> None:
        """Replace the status prefix used by subsequent writes."""
        self._status = text or ''
        self._status_bytes = self._status.encode('utf-8', 'replace')

    @property
    def status(self) -> str:
        """Current status prefix text."""
        return self._status


def _emit(stream: TextIO, record: memoryview) -> None:
    """Echo a record to a standard stream, as bytes where possible."""
    try:
        binary = getattr(stream, 'buffer', None)
        if binary is not None:
            stream.flush()
            binary.write(record)
            binary.flush()
        else:
            stream.write(str(record, 'utf-8', 'replace'))
            stream.flush()
    except (OSError, ValueError):
        pass


# =============================================================================
# Module-level singleton
# =============================================================================

_log: Optional[Logger] = None
_shutdown_registered = False


def _shutdown_log() -> None:
    if _log is not None:
        _log.shutdown()


def _register_shutdown() -> None:
    global _shutdown_registered
    if not _shutdown_registered:
        atexit.register(_shutdown_log)
        _shutdown_registered = True


def init_log(base_path: Union[str, Path] = DEFAULT_LOG_BASENAME,
             **kwargs) -> Logger:
    """Create the process-wide Logger explicitly.

    Any previous instance is shut down first. Keyword arguments are
    passed to Logger (stdout, stderr, launcher, timestamp, viewer,
    launch_viewer).

    Returns:
        The new Logger instance
    """
    global _log
    if _log is not None:
        _log.shutdown()
    _log = Logger(base_path, **kwargs)
    _register_shutdown()
    return _log


def get_log() -> Logger:
    """Get the process-wide Logger, creating a default one if needed.

    The default instance writes Log.err, Log.warn, Log.log and Log.file
    in the current directory. It is shut down at interpreter exit.
    """
    global _log
    if _log is None:
        _log = Logger()
        _register_shutdown()
    return _log


def reset_log() -> None:
    """Close and forget the process-wide Logger without showing the viewer."""
    global _log
    if _log is not None:
        _log.launch_viewer = False
        _log.shutdown()
    _log = None
