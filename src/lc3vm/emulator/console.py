"""
Console Device for Trap Routines
================================

The trap routines talk to the outside world only through a Console, so
the machine can run against the real terminal, a file, or an in-memory
buffer in tests.

Input calls block until data arrives; there is no timeout.
"""

import sys
from typing import BinaryIO, Optional, Protocol


class Console(Protocol):
    """
    Protocol for the console used by GETC, PUTC, PUTS, INU16 and OUTU16.
    """
    def read_byte(self) -> Optional[int]:
        """Block for one input byte. Returns None at end of input."""
        ...

    def read_line(self) -> str:
        """Block for one line of input, including its line ending if any."""
        ...

    def write(self, data: bytes) -> None:
        """Write raw output bytes."""
        ...


class StreamConsole:
    """
    Console over a pair of binary streams.

    Defaults to the binary buffers under sys.stdin and sys.stdout, looked
    up when the console is built so redirected streams are honoured.

    Example:
        >>> import io
        >>> out = io.BytesIO()
        >>> con = StreamConsole(io.BytesIO(b"A"), out)
        >>> con.read_byte()
        65
        >>> con.write(b"ok")
        >>> out.getvalue()
        b'ok'
    """

    def __init__(
        self,
        input_stream: Optional[BinaryIO] = None,
        output_stream: Optional[BinaryIO] = None,
    ):
        self._input = input_stream if input_stream is not None else sys.stdin.buffer
        self._output = output_stream if output_stream is not None else sys.stdout.buffer

    def read_byte(self) -> Optional[int]:
        data = self._input.read(1)
        if not data:
            return None
        return data[0]

    def read_line(self) -> str:
        return self._input.readline().decode("utf-8", errors="replace")

    def write(self, data: bytes) -> None:
        self._output.write(data)
        self._output.flush()
