"""
Bounded message formatting for the diagnostic log.

Every message is built inside pre-sized buffers owned by a
MessageBuffer, so the byte work of a write never grows a buffer:

    render -> encode into render buffer (truncate at capacity)
           -> LF to CRLF into replace buffer (single pass, truncate)
           -> [status: ][header] + body into output buffer (truncate)

The only allocations left on the write path are the ones Python makes
for rendering the template itself and for encoding it. Everything past
that point is a copy into one of the three fixed buffers.

A record that had to be truncated anywhere always ends in CRLF, so the
log stays line-oriented no matter what was thrown at it.
"""

from typing import Any, Mapping, Tuple

LOG_BUFFER_SIZE = 2048     # Fixed capacity of one log record, in bytes
MAX_STATUS_SIZE = 1024     # Longest status prefix kept, in bytes

CR = 0x0D
LF = 0x0A
CRLF = b'\r\n'
STATUS_SEPARATOR = b': '
UNFORMATTABLE_ARGS = '<unformattable args>'


def render(template: Any, args: tuple) -> str:
    """Render a printf-style template with its arguments.

    With no arguments the template is returned verbatim, so messages
    containing a literal '%' need no escaping. A single mapping argument
    is used for '%(name)s' style templates, as stdlib logging does.

    Never raises: when formatting fails for any reason the template is
    returned followed by the repr of the arguments, or by
    UNFORMATTABLE_ARGS when even that repr fails.
    """
    if not args:
        return _as_text(template)
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        args = args[0]
    try:
        return str(template) % args
    except Exception:
        pass
    try:
        return f"{_as_text(template)} {args!r}"
    except Exception:
        return f"{_as_text(template)} {UNFORMATTABLE_ARGS}"


def _as_text(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def normalize_line_endings(src, length: int, dst, capacity: int) -> Tuple[int, bool]:
    """Copy src into dst, turning every bare LF into CRLF.

    An LF already preceded by CR is copied unchanged, so running the
    conversion twice gives the same bytes. src is scanned once, left to
    right. Nothing is written at or past dst[capacity]; whatever does
    not fit is dropped.

    Args:
        src: Source bytes (bytes, bytearray or memoryview)
        length: Number of bytes of src to convert
        dst: Writable destination buffer
        capacity: Maximum number of bytes to write into dst

    Returns:
        (bytes written, True if all of src fit)
    """
    written = 0
    prev = None
    for i in range(length):
        byte = src[i]
        expand = byte == LF and prev != CR
        if written + (2 if expand else 1) > capacity:
            return written, False
        if expand:
            dst[written] = CR
            written += 1
        dst[written] = byte
        written += 1
        prev = byte
    return written, True


class MessageBuffer:
    """Reusable fixed-capacity buffers for composing log records.

    One MessageBuffer belongs to one Logger. compose() returns a view into
    the output buffer, valid until the next compose() call.

    Usage::

        buf = MessageBuffer()
        record = buf.compose("bad value 7", status=b"Loading", header=b"Error: ")
        bytes(record)   # b'Loading: Error: bad value 7\\r\\n'
    """

    def __init__(self, capacity: int = LOG_BUFFER_SIZE,
                 max_status: int = MAX_STATUS_SIZE):
        if max_status + len(STATUS_SEPARATOR) + len(CRLF) > capacity:
            raise ValueError(
                f"max_status ({max_status}) leaves no room in a "
                f"{capacity}-byte record")
        self.capacity = capacity
        self.max_status = max_status
        self._render = bytearray(capacity)
        self._replace = bytearray(capacity)
        self._output = bytearray(capacity)

    def compose(self, text: str, status: bytes = b'',
                header: bytes = b'') -> memoryview:
        """Build one record: [status: ][header]text, CRLF-terminated.

        Args:
            text: Rendered message text
            status: Encoded status; empty for no status prefix
            header: Encoded channel header

        Returns:
            View of the composed record inside the output buffer
        """
        capacity = self.capacity

        # 1. Encode into the render buffer, adding the line terminator
        encoded = memoryview(text.encode('utf-8', 'replace'))
        size = min(len(encoded), capacity)
        truncated = size < len(encoded)
        self._render[:size] = encoded[:size]
        if not text.endswith('\n'):
            if size < capacity:
                self._render[size] = LF
                size += 1
            else:
                truncated = True

        # 2. LF -> CRLF
        body, complete = normalize_line_endings(
            self._render, size, self._replace, capacity)
        truncated = truncated or not complete

        # 3. Prefix, counted against the same capacity
        out = self._output
        pos = 0
        if status:
            count = min(len(status), self.max_status)
            # Never split a UTF-8 sequence: back up over continuation bytes
            while 0 < count < len(status) and (status[count] & 0xC0) == 0x80:
                count -= 1
            out[:count] = status[:count]
            out[count:count + len(STATUS_SEPARATOR)] = STATUS_SEPARATOR
            pos = count + len(STATUS_SEPARATOR)
        if header:
            count = min(len(header), capacity - pos)
            out[pos:pos + count] = header[:count]
            pos += count

        # 4. Body, cut so prefix + body fits
        count = min(body, capacity - pos)
        truncated = truncated or count < body
        out[pos:pos + count] = memoryview(self._replace)[:count]
        total = pos + count

        # A cut record fills the capacity and still ends in CRLF. The
        # LF -> CRLF pass can stop one byte short of it.
        if truncated:
            if total < capacity:
                total += 1
            out[total - len(CRLF):total] = CRLF
        return memoryview(out)[:total]
