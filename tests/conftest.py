"""
LC-3 VM Test Configuration
==========================

Shared fixtures for the VM test suite:
- MockConsole: scripted input, captured output
- machine: a Machine wired to a MockConsole and a RecordingTrace
"""

from typing import Optional

import pytest

from lc3vm.emulator import Machine, RecordingTrace


# =============================================================================
# Mock Console
# =============================================================================

class MockConsole:
    """
    In-memory console for trap testing.

    Input is supplied up front as bytes; output is accumulated and
    can be inspected via `output` / `text`.
    """

    def __init__(self, input_data: bytes = b""):
        self._input = bytearray(input_data)
        self.output = bytearray()

    def feed(self, data: bytes) -> None:
        """Append more input."""
        self._input.extend(data)

    def read_byte(self) -> Optional[int]:
        if not self._input:
            return None
        return self._input.pop(0)

    def read_line(self) -> str:
        end = self._input.find(b"\n")
        if end < 0:
            line = bytes(self._input)
            self._input.clear()
        else:
            line = bytes(self._input[:end + 1])
            del self._input[:end + 1]
        return line.decode("utf-8")

    def write(self, data: bytes) -> None:
        self.output.extend(data)

    @property
    def text(self) -> str:
        return self.output.decode("latin-1")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def console():
    """Empty mock console."""
    return MockConsole()


@pytest.fixture
def trace():
    """Recording trace sink."""
    return RecordingTrace()


@pytest.fixture
def machine(console, trace):
    """Fresh machine using the mock console and recording trace."""
    return Machine(console=console, trace=trace)
