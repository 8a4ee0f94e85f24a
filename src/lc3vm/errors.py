"""
LC-3 VM Error Hierarchy
=======================

All exceptions raised by the virtual machine inherit from LC3Error, so
callers can catch every VM-related failure with a single except clause.

Exception Hierarchy
-------------------
LC3Error (base)
├── ImageLoadError - program image could not be opened or read
└── DecodeError - a decoded field fell outside its closed identifier set

Recoverable conditions (unimplemented opcodes, unimplemented trap vectors,
malformed hexadecimal input) are not exceptions: they are logged and
reported to the trace sink while execution continues.
"""

from pathlib import Path
from typing import Optional, Union


class LC3Error(Exception):
    """
    Base exception for all LC-3 VM errors.

        try:
            machine.load_file("program.bin")
        except LC3Error as e:
            print(f"Error: {e}")
    """
    pass


class ImageLoadError(LC3Error):
    """
    Program image could not be loaded.

    Raised when the image file cannot be opened or read. This is a fatal
    startup error; the CLI reports it and exits with a non-zero status.

    Attributes:
        path: Path of the image that failed to load
        reason: Underlying OS error message (optional)
    """

    def __init__(self, path: Union[str, Path], reason: Optional[str] = None):
        self.path = Path(path)
        self.reason = reason
        message = f"failed to load image '{self.path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DecodeError(LC3Error):
    """
    A numeric field decoded outside its closed identifier set.

    With 16-bit instruction words and correct field masks this cannot
    happen; seeing it means the emulator itself is broken, so it is never
    caught inside the run loop.

    Attributes:
        kind: What was being decoded ("register" or "opcode")
        value: The offending numeric value
    """

    def __init__(self, kind: str, value: int):
        self.kind = kind
        self.value = value
        super().__init__(f"invalid {kind} identifier: {value}")
