"""
LC-3 Virtual Machine
====================

This package emulates the LC-3, a 16-bit educational instruction set with
eight general purpose registers, a flat word-addressed memory of 65536
words, condition-flag branching and software traps for console I/O.

Main Components
---------------
- **emulator**: the fetch/decode/execute engine
    Memory, register file, decoder, instruction handlers, trap routines,
    image loader and the per-step trace sink.

- **cli**: command-line front end (lc3run)
    Loads a binary program image and runs it with a trace on stdout.

Quick Start
-----------
Run a program image:
    >>> from lc3vm.emulator import Machine
    >>> machine = Machine()
    >>> machine.load_file("hello.bin")
    >>> machine.run()

Execute a hand-written program:
    >>> machine = Machine()
    >>> machine.load_words([0x1021, 0xF025])  # ADD R0,R0,#1 ; HALT
    2
    >>> machine.run()
    2
    >>> machine.regs[0]
    1

Or use the command-line tool:
    $ lc3run program.bin
"""

__version__ = "0.3.0"

from lc3vm.errors import DecodeError, ImageLoadError, LC3Error

__all__ = [
    "__version__",
    "LC3Error",
    "ImageLoadError",
    "DecodeError",
]
