"""
Execution Trace Sinks
=====================

The machine reports to a TraceSink exactly once per instruction, after
fetch and before execution, plus free-form notices for recoverable
anomalies (unimplemented opcodes or trap vectors, bad numeric input,
halt). The sink is injected, so the core never prints on its own.

Sinks provided:
- NullTrace: discards everything
- TextTrace: one human-readable line per instruction
- RecordingTrace: keeps structured records in memory
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol, TextIO

import click

from .decoder import Opcode
from .registers import RegisterSnapshot


class TraceSink(Protocol):
    """Observer interface for the run loop."""

    def before_instruction(
        self,
        address: int,
        instr: int,
        opcode: Opcode,
        regs: RegisterSnapshot,
    ) -> None:
        """
        Called once per instruction before it executes.

        Args:
            address: Address the instruction was fetched from
            instr: Raw instruction word
            opcode: Decoded opcode
            regs: Register state before execution (PC already advanced)
        """
        ...

    def notice(self, message: str) -> None:
        """Report a recoverable anomaly or state change."""
        ...


class NullTrace:
    """Sink that ignores everything."""

    def before_instruction(self, address, instr, opcode, regs) -> None:
        pass

    def notice(self, message: str) -> None:
        pass


def format_trace_line(address: int, instr: int, opcode: Opcode, regs: RegisterSnapshot) -> str:
    """
    Format one trace line.

    Example:
        pc=0x3000 cond=0b010 R0=0x0000 ... R7=0x0000 instr=0x1021 opcode=ADD
    """
    parts = [f"pc=0x{address:04x}", f"cond=0b{regs.cond:03b}"]
    parts.extend(f"R{i}=0x{value:04x}" for i, value in enumerate(regs.general))
    parts.append(f"instr=0x{instr:04x}")
    parts.append(f"opcode={opcode.name}")
    return " ".join(parts)


class TextTrace:
    """
    Human-readable trace written through click.echo.

    Args:
        output: Text stream to write to (default: stdout)
    """

    def __init__(self, output: Optional[TextIO] = None):
        self._output = output

    def before_instruction(self, address, instr, opcode, regs) -> None:
        click.echo(format_trace_line(address, instr, opcode, regs), file=self._output)

    def notice(self, message: str) -> None:
        click.echo(f"-- {message}", file=self._output)


@dataclass(frozen=True)
class TraceRecord:
    """One executed instruction as seen by the trace."""
    address: int
    instr: int
    opcode: Opcode
    regs: RegisterSnapshot


@dataclass
class RecordingTrace:
    """
    Sink that stores everything it receives.

    Attributes:
        records: One TraceRecord per executed instruction, in order
        notices: Notice messages, in order
    """
    records: list[TraceRecord] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    def before_instruction(self, address, instr, opcode, regs) -> None:
        self.records.append(TraceRecord(address, instr, opcode, regs))

    def notice(self, message: str) -> None:
        self.notices.append(message)

    @property
    def opcodes(self) -> list[Opcode]:
        return [r.opcode for r in self.records]
