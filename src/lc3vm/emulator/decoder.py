"""
LC-3 Instruction Decoder
========================

Pure, stateless field extraction from 16-bit instruction words.

Instruction word layout (fields overlap; each opcode uses a subset):

    15 14 13 12 | 11 10  9 |  8  7  6 |  5 |  4  3 |  2  1  0
       opcode   |   DR     |   SR1    | i5 |       |   SR2
                |  nzp     |          |    |       |
                |          offset9 (bits 8-0)
                |    offset11 (bits 10-0), bit 11 = JSR mode
                |          trap vector (bits 7-0)

All values are Python ints holding 16-bit unsigned quantities. Sign
extension produces the two's-complement bit pattern in 16 bits, not a
negative Python int; callers add and mask with 0xFFFF.
"""

from enum import IntEnum, IntFlag

from lc3vm.errors import DecodeError


WORD_MASK = 0xFFFF


class Opcode(IntEnum):
    """The sixteen 4-bit opcodes (bits 15-12)."""
    BR = 0x0
    ADD = 0x1
    LD = 0x2
    ST = 0x3
    JSR = 0x4
    AND = 0x5
    LDR = 0x6
    STR = 0x7
    RTI = 0x8  # not implemented
    NOT = 0x9
    LDI = 0xA
    STI = 0xB
    JMP = 0xC
    RESERVED = 0xD
    LEA = 0xE
    TRAP = 0xF


class Register(IntEnum):
    """
    Register file slots.

    R0-R7 are the general purpose registers addressable from instruction
    fields. PC and COND are only reachable by the machine itself.
    """
    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    PC = 8
    COND = 9


class Condition(IntFlag):
    """
    Condition register values.

    Exactly one of these is held after any flag-updating instruction.
    The BR instruction's nzp bits use the same encoding, so a branch is
    taken when (COND & nzp) != 0.
    """
    POS = 1 << 0
    ZERO = 1 << 1
    NEG = 1 << 2


GENERAL_REGISTERS = tuple(Register(i) for i in range(8))


# =============================================================================
# Typed Lookups
# =============================================================================

def to_opcode(value: int) -> Opcode:
    """Map a 4-bit value to its Opcode, raising DecodeError outside 0-15."""
    try:
        return Opcode(value)
    except ValueError:
        raise DecodeError("opcode", value) from None


def to_register(value: int) -> Register:
    """Map an index to its Register, raising DecodeError outside 0-9."""
    try:
        return Register(value)
    except ValueError:
        raise DecodeError("register", value) from None


# =============================================================================
# Field Extraction
# =============================================================================

def opcode(instr: int) -> Opcode:
    """Opcode from bits 15-12."""
    return to_opcode((instr >> 12) & 0xF)


def dest_reg(instr: int) -> Register:
    """Destination register (bits 11-9). Also the source for ST/STI/STR."""
    return to_register((instr >> 9) & 0x7)


def src_reg1(instr: int) -> Register:
    """Source register 1 / base register (bits 8-6)."""
    return to_register((instr >> 6) & 0x7)


def src_reg2(instr: int) -> Register:
    """Source register 2 (bits 2-0)."""
    return to_register(instr & 0x7)


def trap_vector(instr: int) -> int:
    """Trap vector (bits 7-0)."""
    return instr & 0xFF


def branch_bits(instr: int) -> int:
    """BR condition mask n/z/p (bits 11-9)."""
    return (instr >> 9) & 0x7


def is_bit_set(instr: int, bit: int) -> bool:
    return ((instr >> bit) & 1) != 0


def sign_extend(value: int, bits: int) -> int:
    """
    Sign-extend an n-bit field to a 16-bit two's-complement word.

    Args:
        value: Field value, already masked to `bits` bits
        bits: Field width (1-16)

    Returns:
        value with bits `bits` through 15 set if the field's top bit is
        set, otherwise value unchanged

    Raises:
        ValueError: If `value` does not fit in `bits` bits. Callers always
            mask first, so this indicates a bug rather than bad input.

    Example:
        >>> hex(sign_extend(0x1F, 5))
        '0xffff'
        >>> sign_extend(0x0F, 5)
        15
    """
    if not 1 <= bits <= 16:
        raise ValueError(f"field width must be 1-16 bits, got {bits}")
    if value < 0 or value >> bits:
        raise ValueError(f"value 0x{value:X} does not fit in {bits} bits")
    if (value >> (bits - 1)) & 1:
        return (value | (WORD_MASK << bits)) & WORD_MASK
    return value


def to_signed(word: int) -> int:
    """Interpret a 16-bit word as a signed Python int."""
    word &= WORD_MASK
    return word - 0x10000 if word & 0x8000 else word


def imm5(instr: int) -> int:
    return sign_extend(instr & 0x1F, 5)


def offset6(instr: int) -> int:
    return sign_extend(instr & 0x3F, 6)


def offset9(instr: int) -> int:
    return sign_extend(instr & 0x1FF, 9)


def offset11(instr: int) -> int:
    return sign_extend(instr & 0x7FF, 11)


def condition_for(value: int) -> Condition:
    """
    Condition flag describing a 16-bit result.

    ZERO if value is 0, NEG if bit 15 is set, POS otherwise.
    """
    value &= WORD_MASK
    if value == 0:
        return Condition.ZERO
    if value >> 15:
        return Condition.NEG
    return Condition.POS
