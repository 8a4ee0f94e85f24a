"""
Memory, Register File and Loader Unit Tests
===========================================
"""

import sys

import pytest

from lc3vm.emulator import (
    MEMORY_SIZE,
    PROGRAM_ORIGIN,
    ByteOrder,
    Condition,
    Memory,
    Register,
    RegisterFile,
    compose_word,
    load_image,
    read_image,
    words_from_bytes,
)
from lc3vm.errors import DecodeError, ImageLoadError


# =============================================================================
# Memory Tests
# =============================================================================

class TestMemory:
    """Flat 64K-word memory."""

    def test_size(self):
        assert len(Memory()) == MEMORY_SIZE == 0x10000

    def test_initialized_to_zero(self):
        mem = Memory()
        assert mem.read(0x0000) == 0
        assert mem.read(0x3000) == 0
        assert mem.read(0xFFFF) == 0

    def test_read_write(self):
        mem = Memory()
        mem.write(0x3000, 0x1234)
        assert mem.read(0x3000) == 0x1234

    def test_address_wraps(self):
        mem = Memory()
        mem.write(0x10005, 0xABCD)
        assert mem.read(0x0005) == 0xABCD

    def test_value_masked(self):
        mem = Memory()
        mem.write(0x4000, 0x12345)
        assert mem.read(0x4000) == 0x2345

    def test_load_words_stops_at_top(self):
        mem = Memory()
        written = mem.load_words(0xFFFE, [1, 2, 3, 4])
        assert written == 2
        assert mem.read(0xFFFE) == 1
        assert mem.read(0xFFFF) == 2
        assert mem.read(0x0000) == 0

    def test_clear(self):
        mem = Memory()
        mem.write(0x1234, 99)
        mem.clear()
        assert mem.read(0x1234) == 0


# =============================================================================
# Register File Tests
# =============================================================================

class TestRegisterFile:
    """Register masking and the condition register."""

    def test_initial_state(self):
        regs = RegisterFile()
        assert all(regs[r] == 0 for r in Register)
        assert regs.cond == 0

    def test_values_masked(self):
        regs = RegisterFile()
        regs[Register.R1] = 0x10001
        assert regs[Register.R1] == 0x0001
        regs[Register.R2] = -1
        assert regs[Register.R2] == 0xFFFF

    def test_pc_wraps(self):
        regs = RegisterFile()
        regs.pc = 0xFFFF + 1
        assert regs.pc == 0x0000

    def test_plain_int_index(self):
        regs = RegisterFile()
        regs[3] = 42
        assert regs[Register.R3] == 42

    def test_index_out_of_range(self):
        regs = RegisterFile()
        with pytest.raises(DecodeError):
            regs[10]

    @pytest.mark.parametrize("value,expected", [
        (0x0000, Condition.ZERO),
        (0x0001, Condition.POS),
        (0x7FFF, Condition.POS),
        (0x8000, Condition.NEG),
        (0xFFFF, Condition.NEG),
    ])
    def test_update_flags(self, value, expected):
        regs = RegisterFile()
        regs[Register.R4] = value
        regs.update_flags(Register.R4)
        assert regs.cond == expected

    def test_snapshot(self):
        regs = RegisterFile()
        regs[Register.R7] = 0x3005
        regs.pc = 0x3001
        regs.cond = Condition.POS
        snap = regs.snapshot()
        assert snap.general[7] == 0x3005
        assert len(snap.general) == 8
        assert snap.pc == 0x3001
        assert snap.cond == Condition.POS

    def test_as_dict(self):
        regs = RegisterFile()
        regs.pc = 0x3000
        d = regs.as_dict()
        assert d["PC"] == 0x3000
        assert set(d) == {"R0", "R1", "R2", "R3", "R4", "R5", "R6", "R7", "PC", "COND"}


# =============================================================================
# Loader Tests
# =============================================================================

class TestComposeWord:
    """Explicit byte-pair composition."""

    def test_little(self):
        assert compose_word(0x21, 0x10, ByteOrder.LITTLE) == 0x1021

    def test_big(self):
        assert compose_word(0x10, 0x21, ByteOrder.BIG) == 0x1021

    def test_native_follows_host(self):
        expected = ByteOrder.LITTLE if sys.byteorder == "little" else ByteOrder.BIG
        assert ByteOrder.NATIVE.resolve() is expected
        assert compose_word(0x21, 0x10) == compose_word(0x21, 0x10, expected)

    def test_words_from_bytes_odd_length(self):
        """A trailing byte fills half a word."""
        assert words_from_bytes(b"\x21\x10\x25", ByteOrder.LITTLE) == [0x1021, 0x0025]
        assert words_from_bytes(b"\x10\x21\xF0", ByteOrder.BIG) == [0x1021, 0xF000]

    def test_empty(self):
        assert words_from_bytes(b"") == []


class TestLoadImage:
    """Images load at the origin with no header."""

    def test_load_at_origin(self):
        mem = Memory()
        loaded = load_image(mem, b"\x21\x10\x25\xF0", byte_order=ByteOrder.LITTLE)
        assert loaded == 4
        assert mem.read(PROGRAM_ORIGIN) == 0x1021
        assert mem.read(PROGRAM_ORIGIN + 1) == 0xF025

    def test_no_origin_header(self):
        """
        A conventional LC-3 object file starts with its origin word.

        The loader does NOT strip it: the header lands at $3000 as data.
        """
        mem = Memory()
        conventional = bytes([0x30, 0x00, 0x10, 0x21, 0xF0, 0x25])
        load_image(mem, conventional, byte_order=ByteOrder.BIG)
        assert mem.read(0x3000) == 0x3000
        assert mem.read(0x3001) == 0x1021

    def test_native_order_differs_from_conventional(self):
        """On little-endian hosts, big-endian object words load byte-swapped."""
        mem = Memory()
        load_image(mem, bytes([0x10, 0x21]))
        if sys.byteorder == "little":
            assert mem.read(0x3000) == 0x2110
        else:
            assert mem.read(0x3000) == 0x1021

    def test_custom_origin(self):
        mem = Memory()
        load_image(mem, b"\x01\x00", origin=0x4000, byte_order=ByteOrder.LITTLE)
        assert mem.read(0x4000) == 0x0001

    def test_truncated_at_top_of_memory(self):
        mem = Memory()
        loaded = load_image(mem, b"\x01\x00" * 4, origin=0xFFFE, byte_order=ByteOrder.LITTLE)
        assert loaded == 4
        assert mem.read(0xFFFF) == 1
        assert mem.read(0x0000) == 0


class TestReadImage:
    def test_read_file(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(b"\x21\x10")
        assert read_image(path) == b"\x21\x10"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError) as exc_info:
            read_image(tmp_path / "missing.bin")
        assert exc_info.value.path.name == "missing.bin"
        assert "missing.bin" in str(exc_info.value)

    def test_directory(self, tmp_path):
        with pytest.raises(ImageLoadError):
            read_image(tmp_path)
