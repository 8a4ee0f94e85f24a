"""
Trap Routines
=============

Console I/O service routines invoked by the TRAP instruction, keyed by
the 8-bit trap vector in bits 7-0 of the instruction.

    Vector  Name     Effect
    ------  ------   ---------------------------------------------------
    $20     GETC     Read one byte into R0 (zero-extended)
    $21     PUTC     Write the low byte of R0
    $22     PUTS     Write the zero-terminated string at [R0] as UTF-8
    $23     IN       Not implemented (reported, no state change)
    $24     PUTSP    Not implemented (reported, no state change)
    $25     HALT     Stop the run loop
    $26     INU16    Read a hexadecimal line into R0
    $27     OUTU16   Write R0 as hexadecimal

Any other vector is reported as reserved and otherwise ignored. The
routines are implemented natively; there is no trap vector table in
memory and no jump through it.
"""

import logging
import re
from enum import IntEnum
from typing import Callable, TYPE_CHECKING

from .decoder import Register

if TYPE_CHECKING:
    from .machine import Machine

logger = logging.getLogger(__name__)


class TrapVector(IntEnum):
    GETC = 0x20
    PUTC = 0x21
    PUTS = 0x22
    IN = 0x23
    PUTSP = 0x24
    HALT = 0x25
    INU16 = 0x26
    OUTU16 = 0x27


# 1+ hex digits, optional leading '+'; the value must also fit in 16 bits
_HEX_U16 = re.compile(r"\+?[0-9A-Fa-f]+")

REPLACEMENT_CHAR = "\ufffd"


def parse_u16_hex(text: str) -> int:
    """
    Parse hexadecimal text (no 0x prefix) as a 16-bit unsigned value.

    Raises:
        ValueError: If text is empty, has non-hex characters, or the value
            exceeds 0xFFFF
    """
    if not _HEX_U16.fullmatch(text):
        raise ValueError(f"invalid digit found in {text!r}")
    value = int(text, 16)
    if value > 0xFFFF:
        raise ValueError(f"number too large to fit in 16 bits: {text!r}")
    return value


# =============================================================================
# Trap Routines
# =============================================================================

def trap_getc(machine: "Machine") -> None:
    machine.console.write(b"Enter char: ")
    value = machine.console.read_byte()
    if value is None:
        logger.debug("GETC hit end of input; R0 = 0")
        value = 0
    machine.regs[Register.R0] = value


def trap_putc(machine: "Machine") -> None:
    machine.console.write(bytes([machine.regs[Register.R0] & 0xFF]))


def trap_puts(machine: "Machine") -> None:
    """
    Write the zero-terminated string at [R0] as UTF-8.

    Each word is one code point. Words in the surrogate range D800-DFFF
    have no character of their own and are written as U+FFFD.
    """
    address = machine.regs[Register.R0]
    chars = []
    # Bounded by memory size so a string with no terminator cannot spin forever
    for _ in range(len(machine.memory)):
        word = machine.memory.read(address)
        if word == 0:
            break
        chars.append(REPLACEMENT_CHAR if 0xD800 <= word <= 0xDFFF else chr(word))
        address = (address + 1) & 0xFFFF
    machine.console.write("".join(chars).encode("utf-8"))


def trap_halt(machine: "Machine") -> None:
    logger.debug("THALT")
    machine.trace.notice("THALT")
    machine.running = False


def trap_inu16(machine: "Machine") -> None:
    """Read a line, parse it as hex and store it in R0; R0 is unchanged on failure."""
    machine.console.write(b"Enter u16: 0x")
    line = machine.console.read_line()
    text = line.rstrip("\r\n")
    try:
        value = parse_u16_hex(text)
    except ValueError as e:
        message = f"failed to parse '{text}': {e}"
        logger.warning(message)
        machine.trace.notice(message)
        return
    machine.regs[Register.R0] = value


def trap_outu16(machine: "Machine") -> None:
    machine.console.write(f"0x{machine.regs[Register.R0]:04x}\n".encode("ascii"))


def trap_reserved(machine: "Machine", vector: int) -> None:
    try:
        name = TrapVector(vector).name
    except ValueError:
        name = f"0x{vector:02x}"
    message = f"trapvec reserved/not implemented: {name}"
    logger.warning(message)
    machine.trace.notice(message)


TRAP_ROUTINES: dict[TrapVector, Callable[["Machine"], None]] = {
    TrapVector.GETC: trap_getc,
    TrapVector.PUTC: trap_putc,
    TrapVector.PUTS: trap_puts,
    TrapVector.HALT: trap_halt,
    TrapVector.INU16: trap_inu16,
    TrapVector.OUTU16: trap_outu16,
}


def execute_trap(machine: "Machine", vector: int) -> None:
    """Run the routine for vector, or report it as reserved."""
    routine = TRAP_ROUTINES.get(vector)
    if routine is None:
        trap_reserved(machine, vector)
    else:
        routine(machine)
