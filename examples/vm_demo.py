#!/usr/bin/env python3
"""
LC-3 VM Demo
============

This script demonstrates how to use the lc3vm package to:
1. Build a machine with a recording trace
2. Load a small hand-assembled program
3. Run it and inspect registers and the trace
4. Step a program one instruction at a time

Usage:
    python examples/vm_demo.py
"""

from lc3vm.emulator import Machine, Opcode, RecordingTrace, StreamConsole, format_trace_line


# LEA R0,MSG ; PUTS ; AND R1,R1,#0 ; ADD R1,R1,#3
# loop: ADD R0,R1,#0 ; OUTU16 ; ADD R1,R1,#-1 ; BRp loop ; HALT
# MSG: "Hi\n"
COUNTDOWN = [
    0xE008, 0xF022, 0x5260, 0x1263,
    0x1060, 0xF027, 0x127F, 0x03FC,
    0xF025,
    ord("H"), ord("i"), ord("\n"), 0,
]


def main():
    # ==========================================================================
    # 1. Create a machine
    # ==========================================================================
    # The console defaults to stdin/stdout; the trace sink is pluggable.
    trace = RecordingTrace()
    machine = Machine(console=StreamConsole(), trace=trace)

    # ==========================================================================
    # 2. Load and run
    # ==========================================================================
    machine.load_words(COUNTDOWN)
    steps = machine.run()

    print(f"\nExecuted {steps} instructions")
    print(f"Registers: {machine.registers}")

    # ==========================================================================
    # 3. Inspect the trace
    # ==========================================================================
    print("\nFirst five trace lines:")
    for record in trace.records[:5]:
        print("  " + format_trace_line(record.address, record.instr, record.opcode, record.regs))

    # ==========================================================================
    # 4. Single-step
    # ==========================================================================
    machine.reset()
    machine.load_words([0x1021, 0x1021, 0xF025])
    machine.regs.pc = machine.config.origin
    while True:
        op = machine.step()
        print(f"  {op.name:5} -> R0=0x{machine.regs[0]:04x}")
        if op is Opcode.TRAP:
            break


if __name__ == "__main__":
    main()
