"""
Program Image Loader
====================

Copies a raw program image into memory at a fixed origin.

Image Format
------------
The image is a flat sequence of bytes with no header: byte pairs are
composed into 16-bit words and written to consecutive addresses starting
at the origin ($3000 by default). Execution also starts at the origin.

By default the pairs are composed in the host's native byte order, which
is how images produced for this VM have always been read. The
conventional LC-3 object format (a leading 2-byte origin word and
big-endian words) is NOT assumed; use ByteOrder.BIG with an image
stripped of its origin word to run such files.

A trailing odd byte fills half a word, the other half reading as zero.
Bytes that do not fit between the origin and the top of memory are
ignored.
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Union

from lc3vm.errors import ImageLoadError
from .memory import MEMORY_SIZE, Memory

logger = logging.getLogger(__name__)


PROGRAM_ORIGIN = 0x3000


class ByteOrder(Enum):
    """How two consecutive image bytes form one word."""
    NATIVE = "native"
    LITTLE = "little"
    BIG = "big"

    def resolve(self) -> "ByteOrder":
        """Replace NATIVE with the host's concrete byte order."""
        if self is ByteOrder.NATIVE:
            return ByteOrder.LITTLE if sys.byteorder == "little" else ByteOrder.BIG
        return self


def compose_word(first: int, second: int, byte_order: ByteOrder = ByteOrder.NATIVE) -> int:
    """
    Compose one word from two consecutive image bytes.

    Args:
        first: Byte at the lower file offset
        second: Byte at the higher file offset
        byte_order: LITTLE puts `first` in the low byte, BIG in the high
            byte; NATIVE follows the host

    Example:
        >>> hex(compose_word(0x21, 0x10, ByteOrder.LITTLE))
        '0x1021'
        >>> hex(compose_word(0x10, 0x21, ByteOrder.BIG))
        '0x1021'
    """
    first &= 0xFF
    second &= 0xFF
    if byte_order.resolve() is ByteOrder.BIG:
        return (first << 8) | second
    return (second << 8) | first


def words_from_bytes(data: bytes, byte_order: ByteOrder = ByteOrder.NATIVE) -> list[int]:
    """
    Convert an image byte buffer to words.

    An odd trailing byte is paired with a zero byte in the position it
    would occupy in memory.
    """
    words = []
    for i in range(0, len(data) - 1, 2):
        words.append(compose_word(data[i], data[i + 1], byte_order))
    if len(data) % 2:
        words.append(compose_word(data[-1], 0, byte_order))
    return words


def load_image(
    memory: Memory,
    data: bytes,
    origin: int = PROGRAM_ORIGIN,
    byte_order: ByteOrder = ByteOrder.NATIVE,
) -> int:
    """
    Copy an image buffer into memory at origin.

    Args:
        memory: Destination memory
        data: Raw image bytes
        origin: First address to fill
        byte_order: Byte pairing rule (see compose_word)

    Returns:
        Number of image bytes copied into memory
    """
    origin &= 0xFFFF
    capacity = (MEMORY_SIZE - origin) * 2
    if len(data) > capacity:
        logger.warning(
            f"Image is {len(data)} bytes but only {capacity} fit above "
            f"0x{origin:04x}; truncating"
        )
        data = data[:capacity]
    memory.load_words(origin, words_from_bytes(data, byte_order))
    return len(data)


def read_image(path: Union[str, Path]) -> bytes:
    """
    Read a program image file.

    Raises:
        ImageLoadError: If the file cannot be opened or read
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise ImageLoadError(path, e.strerror or str(e)) from e
