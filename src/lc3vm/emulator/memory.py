"""
Memory Subsystem for the LC-3 VM
================================

Flat, unprotected address space of 65536 16-bit words. Every address is
valid; address arithmetic wraps modulo 0x10000, so reads and writes mask
their address rather than rejecting it.

Memory Map (conventional, not enforced):
    $0000-$00FF  Trap vector table
    $0100-$01FF  Interrupt vector table
    $0200-$2FFF  Operating system and supervisor stack
    $3000-$FDFF  User programs (images load at $3000)
    $FE00-$FFFF  Device registers (not emulated)
"""

from array import array
from typing import Iterable


MEMORY_SIZE = 1 << 16
ADDRESS_MASK = MEMORY_SIZE - 1


class Memory:
    """
    Word-addressed memory.

    Backed by an unsigned 16-bit array so stored values always fit a word.

    Example:
        >>> mem = Memory()
        >>> mem.write(0x3000, 0x1021)
        >>> hex(mem.read(0x3000))
        '0x1021'
        >>> mem.read(0x13000) == mem.read(0x3000)  # addresses wrap
        True
    """

    def __init__(self):
        self._data = array("H", bytes(MEMORY_SIZE * 2))

    def __len__(self) -> int:
        return MEMORY_SIZE

    def read(self, address: int) -> int:
        """Read the word at address (wrapped to 16 bits)."""
        return self._data[address & ADDRESS_MASK]

    def write(self, address: int, value: int) -> None:
        """Write a word; address and value are both masked to 16 bits."""
        self._data[address & ADDRESS_MASK] = value & 0xFFFF

    def load_words(self, address: int, words: Iterable[int]) -> int:
        """
        Copy words into memory starting at address.

        Stops at the top of memory instead of wrapping back to $0000.

        Returns:
            Number of words written
        """
        address &= ADDRESS_MASK
        count = 0
        for word in words:
            if address + count >= MEMORY_SIZE:
                break
            self._data[address + count] = word & 0xFFFF
            count += 1
        return count

    def clear(self) -> None:
        """Zero all of memory."""
        self._data = array("H", bytes(MEMORY_SIZE * 2))
