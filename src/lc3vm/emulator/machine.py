"""
LC-3 Machine
============

Owns memory, the register file and the running flag, and drives the
fetch/decode/execute loop.

Execution cycle (one step):
    1. Fetch the word at PC
    2. Advance PC by one (wrapping at $FFFF)
    3. Decode the opcode and report the instruction to the trace sink
    4. Dispatch to the handler, which mutates registers/memory

PC-relative addresses (LD, LDI, LEA, ST, STI, BR) are therefore computed
from the address of the NEXT instruction. HALT is the only way the loop
clears the running flag.

Example:
    >>> from lc3vm.emulator import Machine
    >>> machine = Machine()
    >>> machine.load_words([0x1021, 0xF025])  # ADD R0,R0,#1 ; TRAP HALT
    2
    >>> machine.run()
    2
    >>> machine.regs[0], machine.running
    (1, False)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from .console import Console, StreamConsole
from .decoder import (
    Opcode,
    Register,
    branch_bits,
    dest_reg,
    imm5,
    is_bit_set,
    offset6,
    offset9,
    offset11,
    opcode,
    src_reg1,
    src_reg2,
    trap_vector,
)
from .loader import PROGRAM_ORIGIN, ByteOrder, load_image, read_image
from .memory import Memory
from .registers import RegisterFile
from .trace import NullTrace, TraceSink
from .traps import execute_trap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MachineConfig:
    """
    Configuration for a Machine.

    Attributes:
        origin: Address images load at and execution starts from
        byte_order: How image byte pairs compose words (see loader)
        max_steps: Stop run() after this many instructions even if the
                   program has not halted. None means no limit.

    Example:
        >>> config = MachineConfig(byte_order=ByteOrder.BIG, max_steps=10_000)
    """
    origin: int = PROGRAM_ORIGIN
    byte_order: ByteOrder = ByteOrder.NATIVE
    max_steps: Optional[int] = None


class Machine:
    """
    LC-3 virtual machine.

    Attributes:
        config: The MachineConfig used to build this instance
        memory: 64K words of memory
        regs: Register file (R0-R7, PC, COND)
        running: True while run() is executing, cleared by HALT
        console: Device used by the trap routines
        trace: Sink notified before each instruction

    Example:
        >>> machine = Machine(trace=RecordingTrace())
        >>> machine.load_file("program.bin")
        >>> machine.run()
    """

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        console: Optional[Console] = None,
        trace: Optional[TraceSink] = None,
    ):
        self.config = config or MachineConfig()
        self.memory = Memory()
        self.regs = RegisterFile()
        self.running = False
        self.console = console if console is not None else StreamConsole()
        self.trace = trace if trace is not None else NullTrace()
        self._instruction_count = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load(self, data: bytes) -> int:
        """
        Copy a raw image into memory at the configured origin.

        Returns:
            Number of bytes loaded
        """
        return load_image(self.memory, data, self.config.origin, self.config.byte_order)

    def load_file(self, path: Union[str, Path]) -> int:
        """
        Load an image file at the configured origin.

        Raises:
            ImageLoadError: If the file cannot be opened or read
        """
        logger.info(f"Loading '{path}' at 0x{self.config.origin:04x}...")
        loaded = self.load(read_image(path))
        logger.info(f"Loaded {loaded} bytes")
        return loaded

    def load_words(self, words: Iterable[int], address: Optional[int] = None) -> int:
        """Write words directly, at the origin unless address is given."""
        if address is None:
            address = self.config.origin
        return self.memory.load_words(address, words)

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """Zero memory and registers and clear the running flag."""
        self.memory.clear()
        self.regs.reset()
        self.running = False
        self._instruction_count = 0

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        Run from the origin until HALT.

        Args:
            max_steps: Instruction budget for this call; falls back to
                       config.max_steps. When exhausted the loop stops with
                       running still True.

        Returns:
            Number of instructions executed
        """
        if max_steps is None:
            max_steps = self.config.max_steps

        self.regs.pc = self.config.origin
        self.running = True

        steps = 0
        while self.running:
            if max_steps is not None and steps >= max_steps:
                logger.warning(f"Stopped after {steps} instructions without HALT")
                break
            self.step()
            steps += 1
        return steps

    def step(self) -> Opcode:
        """
        Execute exactly one instruction at PC.

        Does not look at the running flag, so single instructions can be
        executed on a machine that was never started.

        Returns:
            The opcode that was executed
        """
        address = self.regs.pc
        instr = self.memory.read(address)
        self.regs.pc = address + 1

        op = opcode(instr)
        self.trace.before_instruction(address, instr, op, self.regs.snapshot())
        self._dispatch(op, instr)
        self._instruction_count += 1
        return op

    def execute(self, instr: int) -> None:
        """Decode and execute a single instruction word without fetching it."""
        self._dispatch(opcode(instr), instr & 0xFFFF)

    def _dispatch(self, op: Opcode, instr: int) -> None:
        match op:
            case Opcode.ADD:
                self._op_add(instr)
            case Opcode.AND:
                self._op_and(instr)
            case Opcode.LD:
                self._op_ld(instr)
            case Opcode.LDI:
                self._op_ldi(instr)
            case Opcode.LDR:
                self._op_ldr(instr)
            case Opcode.LEA:
                self._op_lea(instr)
            case Opcode.NOT:
                self._op_not(instr)
            case Opcode.ST:
                self._op_st(instr)
            case Opcode.STI:
                self._op_sti(instr)
            case Opcode.STR:
                self._op_str(instr)
            case Opcode.JMP:
                self._op_jmp(instr)
            case Opcode.JSR:
                self._op_jsr(instr)
            case Opcode.BR:
                self._op_br(instr)
            case Opcode.TRAP:
                execute_trap(self, trap_vector(instr))
            case Opcode.RTI | Opcode.RESERVED:
                self._op_reserved(op, instr)

    # =========================================================================
    # Instruction Handlers
    # =========================================================================

    def _operand2(self, instr: int) -> int:
        """imm5 when bit 5 is set, else the value of SR2."""
        if is_bit_set(instr, 5):
            return imm5(instr)
        return self.regs[src_reg2(instr)]

    def _pc_relative(self, instr: int) -> int:
        return (self.regs.pc + offset9(instr)) & 0xFFFF

    def _base_offset(self, instr: int) -> int:
        return (self.regs[src_reg1(instr)] + offset6(instr)) & 0xFFFF

    def _set_result(self, dr: Register, value: int) -> None:
        self.regs[dr] = value
        self.regs.update_flags(dr)

    def _op_add(self, instr: int) -> None:
        # dr = sr1 + (sr2 | imm5)
        self._set_result(dest_reg(instr), self.regs[src_reg1(instr)] + self._operand2(instr))

    def _op_and(self, instr: int) -> None:
        # dr = sr1 & (sr2 | imm5)
        self._set_result(dest_reg(instr), self.regs[src_reg1(instr)] & self._operand2(instr))

    def _op_ld(self, instr: int) -> None:
        # dr = [pc + offset9]
        self._set_result(dest_reg(instr), self.memory.read(self._pc_relative(instr)))

    def _op_ldi(self, instr: int) -> None:
        # dr = [[pc + offset9]]
        pointer = self.memory.read(self._pc_relative(instr))
        self._set_result(dest_reg(instr), self.memory.read(pointer))

    def _op_ldr(self, instr: int) -> None:
        # dr = [sr1 + offset6]
        self._set_result(dest_reg(instr), self.memory.read(self._base_offset(instr)))

    def _op_lea(self, instr: int) -> None:
        # dr = pc + offset9
        self._set_result(dest_reg(instr), self._pc_relative(instr))

    def _op_not(self, instr: int) -> None:
        self._set_result(dest_reg(instr), ~self.regs[src_reg1(instr)])

    def _op_st(self, instr: int) -> None:
        # [pc + offset9] = dr
        self.memory.write(self._pc_relative(instr), self.regs[dest_reg(instr)])

    def _op_sti(self, instr: int) -> None:
        # [[pc + offset9]] = dr
        pointer = self.memory.read(self._pc_relative(instr))
        self.memory.write(pointer, self.regs[dest_reg(instr)])

    def _op_str(self, instr: int) -> None:
        # [sr1 + offset6] = dr
        self.memory.write(self._base_offset(instr), self.regs[dest_reg(instr)])

    def _op_jmp(self, instr: int) -> None:
        self.regs.pc = self.regs[src_reg1(instr)]

    def _op_jsr(self, instr: int) -> None:
        """
        Jump to subroutine, saving the return address in R7.

        With bit 11 set the target is the sign-extended offset11 itself
        (not added to PC); otherwise it is the value of the base register.
        R7 is written first, so JSRR R7 jumps to the return address.
        """
        self.regs[Register.R7] = self.regs.pc
        if is_bit_set(instr, 11):
            self.regs.pc = offset11(instr)
        else:
            self.regs.pc = self.regs[src_reg1(instr)]

    def _op_br(self, instr: int) -> None:
        if self.regs.cond & branch_bits(instr):
            self.regs.pc = self._pc_relative(instr)

    def _op_reserved(self, op: Opcode, instr: int) -> None:
        message = f"opcode reserved/not implemented: {op.name} (instr=0x{instr:04x})"
        logger.warning(message)
        self.trace.notice(message)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict[str, int]:
        """Register values keyed by name (R0-R7, PC, COND)."""
        return self.regs.as_dict()

    @property
    def instruction_count(self) -> int:
        """Instructions executed since construction or the last reset()."""
        return self._instruction_count

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"<Machine pc=0x{self.regs.pc:04x} cond=0b{self.regs.cond:03b} {state}>"
