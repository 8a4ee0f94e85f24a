"""
LC-3 Emulator Core
==================

Module Structure
----------------

- `machine.py`: Machine and MachineConfig (run loop, dispatcher, handlers)
- `decoder.py`: opcode/register enums, field extraction, sign extension
- `registers.py`: register file with condition flags
- `memory.py`: 64K-word flat memory
- `traps.py`: TRAP console routines
- `loader.py`: program image loading and byte-pair composition
- `console.py`: console device used by the traps
- `trace.py`: per-instruction trace sinks

Quick Start
-----------

    >>> from lc3vm.emulator import Machine, RecordingTrace
    >>> trace = RecordingTrace()
    >>> machine = Machine(trace=trace)
    >>> machine.load_words([0x1021, 0xF025])
    2
    >>> machine.run()
    2
    >>> [op.name for op in trace.opcodes]
    ['ADD', 'TRAP']
"""

from .machine import Machine, MachineConfig

from .decoder import (
    Condition,
    Opcode,
    Register,
    condition_for,
    is_bit_set,
    sign_extend,
    to_opcode,
    to_register,
    to_signed,
)

from .memory import MEMORY_SIZE, Memory
from .registers import RegisterFile, RegisterSnapshot

from .loader import (
    PROGRAM_ORIGIN,
    ByteOrder,
    compose_word,
    load_image,
    read_image,
    words_from_bytes,
)

from .console import Console, StreamConsole
from .traps import TrapVector, execute_trap, parse_u16_hex

from .trace import (
    NullTrace,
    RecordingTrace,
    TextTrace,
    TraceRecord,
    TraceSink,
    format_trace_line,
)

__all__ = [
    # Machine
    "Machine",
    "MachineConfig",

    # Decoder
    "Condition",
    "Opcode",
    "Register",
    "condition_for",
    "is_bit_set",
    "sign_extend",
    "to_opcode",
    "to_register",
    "to_signed",

    # State
    "MEMORY_SIZE",
    "Memory",
    "RegisterFile",
    "RegisterSnapshot",

    # Loading
    "PROGRAM_ORIGIN",
    "ByteOrder",
    "compose_word",
    "load_image",
    "read_image",
    "words_from_bytes",

    # Traps and console
    "Console",
    "StreamConsole",
    "TrapVector",
    "execute_trap",
    "parse_u16_hex",

    # Tracing
    "NullTrace",
    "RecordingTrace",
    "TextTrace",
    "TraceRecord",
    "TraceSink",
    "format_trace_line",
]
