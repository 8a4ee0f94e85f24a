"""
LC-3 Register File
==================

Eight general purpose 16-bit registers, the program counter and the
condition register. All writes are masked to 16 bits, so wraparound
arithmetic only needs to happen once, here.
"""

from dataclasses import dataclass

from .decoder import (
    GENERAL_REGISTERS,
    Register,
    condition_for,
    to_register,
)


@dataclass(frozen=True)
class RegisterSnapshot:
    """
    Immutable copy of the register file.

    Attributes:
        general: Values of R0-R7
        pc: Program counter
        cond: Condition register (0 before any flag-updating instruction)
    """
    general: tuple[int, ...]
    pc: int
    cond: int


class RegisterFile:
    """
    Register storage indexed by Register.

    Example:
        >>> regs = RegisterFile()
        >>> regs[Register.R1] = 0x1FFFF
        >>> hex(regs[Register.R1])
        '0xffff'
        >>> regs.update_flags(Register.R1)
        >>> regs.cond
        <Condition.NEG: 4>
    """

    def __init__(self):
        self._values = [0] * len(Register)

    def __getitem__(self, reg: int) -> int:
        return self._values[to_register(reg)]

    def __setitem__(self, reg: int, value: int) -> None:
        self._values[to_register(reg)] = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (address of the next instruction)."""
        return self._values[Register.PC]

    @pc.setter
    def pc(self, value: int) -> None:
        self._values[Register.PC] = value & 0xFFFF

    @property
    def cond(self) -> int:
        """Condition register."""
        return self._values[Register.COND]

    @cond.setter
    def cond(self, value: int) -> None:
        self._values[Register.COND] = value & 0x7

    def update_flags(self, reg: Register) -> None:
        """Set COND from the value now held in reg."""
        self.cond = condition_for(self[reg])

    def reset(self) -> None:
        """Zero every register, including PC and COND."""
        self._values = [0] * len(Register)

    def snapshot(self) -> RegisterSnapshot:
        return RegisterSnapshot(
            general=tuple(self._values[r] for r in GENERAL_REGISTERS),
            pc=self.pc,
            cond=self.cond,
        )

    def as_dict(self) -> dict[str, int]:
        """Register names mapped to values, e.g. {'R0': 0, ..., 'COND': 2}."""
        return {reg.name: self._values[reg] for reg in Register}
