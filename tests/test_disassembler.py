"""
Unit Tests for the Disassembler Module
======================================

This module contains tests for the 6502 disassembler.

Test coverage includes:
- All 6502 addressing modes
- Branch target and page-crossing calculation
- Cycle and label annotations
- Code ranges and hex dumps of undecoded bytes
- Edge cases (unknown opcodes, truncated data, empty input)
- Round trip through the assembler
"""

import pytest

from c64_sdk.assembler import Assembler
from c64_sdk.assembler.labels import Label
from c64_sdk.cpu import AddressingMode
from c64_sdk.disassembler import (
    ByteRun,
    DecodedInstruction,
    Disassembler,
    DisassemblerOptions,
    branch_target,
    chunk_bytes,
    code_ranges_predicate,
    crosses_page,
    disassemble,
)


def prg(load_address: int, *data: int) -> bytes:
    """Build a program file: little-endian load address then data."""
    return bytes([load_address & 0xFF, load_address >> 8, *data])


def decode_one(*data: int, address: int = 0xC000) -> DecodedInstruction:
    entries = Disassembler(prg(address, *data)).decode()
    assert isinstance(entries[0], DecodedInstruction)
    return entries[0]


# =============================================================================
# Addressing Modes
# =============================================================================

class TestAddressingModes:
    """Operand formatting for every addressing mode."""

    @pytest.mark.parametrize("data,text,mode", [
        ((0xA9, 0x05), "LDA #$05", AddressingMode.IMMEDIATE),
        ((0xA5, 0x10), "LDA $10", AddressingMode.ZERO_PAGE),
        ((0xB5, 0x10), "LDA $10,X", AddressingMode.ZERO_PAGE_X),
        ((0xB6, 0x10), "LDX $10,Y", AddressingMode.ZERO_PAGE_Y),
        ((0xAD, 0x34, 0x12), "LDA $1234", AddressingMode.ABSOLUTE),
        ((0xBD, 0x34, 0x12), "LDA $1234,X", AddressingMode.ABSOLUTE_X),
        ((0xB9, 0x34, 0x12), "LDA $1234,Y", AddressingMode.ABSOLUTE_Y),
        ((0x6C, 0x34, 0x12), "JMP ($1234)", AddressingMode.INDIRECT),
        ((0xA1, 0x10), "LDA ($10,X)", AddressingMode.INDIRECT_X),
        ((0xB1, 0x10), "LDA ($10),Y", AddressingMode.INDIRECT_Y),
        ((0xEA,), "NOP", AddressingMode.SINGLE),
        ((0x0A,), "ASL", AddressingMode.SINGLE),
    ])
    def test_mode(self, data, text, mode):
        insn = decode_one(*data)
        assert insn.text == text
        assert insn.mode == mode
        assert insn.raw_bytes == bytes(data)
        assert insn.size == len(data)
        assert insn.address == 0xC000

    def test_branch_forward(self):
        insn = decode_one(0xD0, 0x02)
        assert insn.text == "BNE $C004"
        assert insn.mode == AddressingMode.BRANCH

    def test_branch_backward(self):
        assert decode_one(0xD0, 0xFE).text == "BNE $C000"
        assert decode_one(0xF0, 0x80).text == "BEQ $BF82"

    def test_branch_target(self):
        assert branch_target(0xC000, 0x7F) == 0xC081
        assert branch_target(0x0000, 0xFC) == 0xFFFE

    def test_crosses_page(self):
        assert not crosses_page(0xC000, 0xC004)
        assert crosses_page(0xC0F0, 0xC112)
        # Measured from the instruction after the branch.
        assert not crosses_page(0xC0FE, 0xC110)


# =============================================================================
# Line Formatting
# =============================================================================

class TestFormatting:
    """Exact text layout of the output lines."""

    def test_one_byte_instruction(self):
        assert disassemble(prg(0xC000, 0xEA)) == ["C000: EA" + " " * 11 + "NOP"]

    def test_two_byte_instruction(self):
        assert disassemble(prg(0xC000, 0xA9, 0x05)) == ["C000: A9 05" + " " * 8 + "LDA #$05"]

    def test_three_byte_instruction(self):
        assert disassemble(prg(0xC000, 0x4C, 0x00, 0xC0)) == ["C000: 4C 00 C0     JMP $C000"]

    def test_addresses_follow_load_address(self):
        lines = disassemble(prg(0x0801, 0xEA, 0xA9, 0x01, 0x60))
        assert [line[:4] for line in lines] == ["0801", "0802", "0804"]

    def test_cycles_column(self):
        """Cycle comments start at column 50."""
        line = disassemble(prg(0xC000, 0xEA), options=DisassemblerOptions(show_cycles=True))[0]
        assert line[:50].rstrip() == "C000: EA" + " " * 11 + "NOP"
        assert line[50:] == "; 2"

    def test_page_cross_cycles(self):
        options = DisassemblerOptions(show_cycles=True)
        line = disassemble(prg(0xC000, 0xBD, 0x00, 0x20), options=options)[0]
        assert line.endswith("; 4/5")

    def test_branch_cycles(self):
        """Branch cycles depend on whether the target is on another page."""
        options = DisassemblerOptions(show_cycles=True)
        same_page = disassemble(prg(0xC000, 0xD0, 0x02), options=options)[0]
        other_page = disassemble(prg(0xC0F0, 0xD0, 0x20), options=options)[0]
        assert same_page.endswith("; 2/3")
        assert other_page.endswith("; 3/4")

    def test_labels_column(self):
        options = DisassemblerOptions(show_labels=True)
        lines = disassemble(prg(0xC000, 0xEA, 0x60), [Label("start", 0xC000, 1)], options)
        assert lines[0][50:] == "; start"
        assert lines[1][50:] == "; "

    def test_cycles_then_label(self):
        options = DisassemblerOptions(show_labels=True, show_cycles=True)
        lines = disassemble(prg(0xC000, 0xEA, 0x60), {"start": 0xC000}, options)
        assert lines[0][50:] == "; 2 start"
        assert lines[1][50:] == "; 6 "

    def test_labels_hidden_by_default(self):
        lines = disassemble(prg(0xC000, 0xEA), {"start": 0xC000})
        assert ";" not in lines[0]

    def test_later_label_wins(self):
        options = DisassemblerOptions(show_labels=True)
        labels = [Label("first", 0xC000, 1), Label("second", 0xC000, 2)]
        assert disassemble(prg(0xC000, 0xEA), labels, options)[0].endswith("; second")

    def test_label_recorded_on_decoded_instruction(self):
        entries = Disassembler(prg(0xC000, 0xEA), {"start": 0xC000}).decode()
        assert entries[0].label == "start"


# =============================================================================
# Undecoded Bytes
# =============================================================================

class TestUnknownBytes:
    """Bytes that are not decoded are dumped as hex."""

    def test_unknown_opcode(self):
        assert disassemble(prg(0xC000, 0xFF)) == ["C000: FF"]

    def test_one_byte_per_line(self):
        assert disassemble(prg(0xC000, 0xFF, 0x02)) == ["C000: FF", "C001: 02"]

    def test_run_flushed_before_instruction(self):
        lines = disassemble(prg(0xC000, 0xFF, 0xEA, 0xFF))
        assert lines == ["C000: FF", "C001: EA" + " " * 11 + "NOP", "C002: FF"]

    def test_run_entry(self):
        entries = Disassembler(prg(0xC000, 0xFF, 0x02, 0xEA)).decode()
        assert isinstance(entries[0], ByteRun)
        assert entries[0].address == 0xC000
        assert bytes(entries[0].raw_bytes) == bytes([0xFF, 0x02])
        assert isinstance(entries[1], DecodedInstruction)

    def test_truncated_instruction(self):
        """An instruction running past the end is dumped."""
        lines = disassemble(prg(0xC000, 0xEA, 0xAD, 0x00))
        assert lines[1:] == ["C001: AD", "C002: 00"]

    def test_empty_and_short_buffers(self):
        assert disassemble(b"") == []
        assert disassemble(b"\x01") == []
        assert disassemble(b"\x01\x08") == []

    def test_address_wraps(self):
        lines = disassemble(prg(0xFFFF, 0xEA, 0xEA))
        assert [line[:4] for line in lines] == ["FFFF", "0000"]


class TestCodeRanges:
    """Restricting decoding to code ranges."""

    def test_predicate_is_inclusive(self):
        is_code = code_ranges_predicate([(0x1000, 0x10FF), (0x2000, 0x2000)])
        assert is_code(0x1000)
        assert is_code(0x10FF)
        assert is_code(0x2000)
        assert not is_code(0x1100)
        assert not is_code(0x0FFF)

    def test_data_outside_ranges(self):
        """With ranges, data is dumped 8 bytes per line and code is padded wider."""
        options = DisassemblerOptions(is_instruction=code_ranges_predicate([(0xC002, 0xC0FF)]))
        lines = disassemble(prg(0xC000, 0x01, 0x02, 0xEA), options=options)
        assert lines == ["C000: 01 02", "C002: EA" + " " * 26 + "NOP"]

    def test_eight_bytes_per_line(self):
        options = DisassemblerOptions(is_instruction=lambda address: False)
        lines = disassemble(prg(0xC000, *range(10)), options=options)
        assert lines == [
            "C000: 00 01 02 03 04 05 06 07",
            "C008: 08 09",
        ]


class TestHelpers:
    """Small helpers."""

    def test_chunk_bytes(self):
        assert chunk_bytes([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
        assert chunk_bytes([], 8) == []

    def test_disassemble_to_text(self):
        text = Disassembler(prg(0xC000, 0xEA, 0x60)).disassemble_to_text()
        assert text.splitlines()[1].endswith("RTS")

    def test_load_address(self):
        assert Disassembler(prg(0x0801)).load_address == 0x0801


# =============================================================================
# Round Trip
# =============================================================================

class TestRoundTrip:
    """Assemble, then disassemble with the same labels."""

    def test_supported_forms(self):
        source = """
start:  LDA #$05
        ASL A
        STA $D020
        JSR sub
        JMP start
sub:    RTS
"""
        asm = Assembler()
        asm.assemble_string(source)
        assert not asm.has_errors()

        options = DisassemblerOptions(
            show_labels=True,
            is_instruction=code_ranges_predicate([(0x080D, 0xFFFF)]),
        )
        entries = Disassembler(asm.get_prg(), asm.get_labels(), options).decode()

        # The auto-run stub is dumped as data.
        assert isinstance(entries[0], ByteRun)
        assert entries[0].address == 0x0801
        assert len(entries[0].raw_bytes) == 12

        code = entries[1:]
        assert [insn.text for insn in code] == [
            "LDA #$05",
            "ASL",
            "STA $D020",
            "JSR $0819",
            "JMP $080D",
            "RTS",
        ]
        assert [insn.label for insn in code] == ["start", None, None, None, None, "sub"]
        assert asm.get_symbols() == {"start": 0x080D, "sub": 0x0819}

    def test_stub_lines(self):
        asm = Assembler()
        asm.assemble_string("RTS")
        options = DisassemblerOptions(is_instruction=code_ranges_predicate([(0x080D, 0x080D)]))
        lines = disassemble(asm.get_prg(), options=options)
        assert lines == [
            "0801: 0C 08 00 00 9E 32 30 36",
            "0809: 31 00 00 00",
            "080D: 60" + " " * 26 + "RTS",
        ]
