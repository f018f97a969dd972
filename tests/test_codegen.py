# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the 6502 code generator.
#
# Test coverage includes:
#   - Auto-run stub
#   - Single (implied/accumulator), immediate and absolute encodings
#   - Label resolution across the two passes
#   - Per-pass state and pass invariance
# =============================================================================

import pytest

from c64_sdk.assembler import Assembler
from c64_sdk.assembler.codegen import (
    CodeGenerator,
    PassContext,
    LABEL_PASS,
    EMIT_PASS,
    build_autorun_stub,
)
from c64_sdk.assembler.parser import preprocess


STUB = bytes([0x0C, 0x08, 0x00, 0x00, 0x9E, 0x32, 0x30, 0x36, 0x31, 0x00, 0x00, 0x00])


# =============================================================================
# Helper Functions
# =============================================================================

def assemble(source: str) -> bytes:
    """
    Helper to assemble source code and return the code after the stub.
    Fails the test if the source has errors.
    """
    asm = Assembler()
    result = asm.assemble_string(source)
    assert not asm.has_errors(), asm.get_error_report()
    assert result[:len(STUB)] == STUB
    return result[len(STUB):]


# =============================================================================
# Auto-run Stub
# =============================================================================

class TestAutorunStub:
    """Test the BASIC 'SYS 2061' line placed before the code."""

    def test_default_stub(self):
        assert build_autorun_stub() == STUB
        assert len(STUB) == 0x080D - 0x0801

    def test_digits_without_leading_zeros(self):
        assert build_autorun_stub(49152)[5:-3] == b"49152"
        assert build_autorun_stub(828)[5:-3] == b"828"

    def test_empty_program_is_just_the_stub(self):
        asm = Assembler()
        assert asm.assemble_string("") == STUB


# =============================================================================
# Encodings
# =============================================================================

class TestSingleMode:
    """Implied and accumulator forms."""

    def test_nop(self):
        assert assemble("NOP") == bytes([0xEA])

    def test_rts(self):
        assert assemble("RTS") == bytes([0x60])

    def test_brk(self):
        assert assemble("BRK") == bytes([0x00])

    def test_accumulator_implicit(self):
        assert assemble("ASL") == bytes([0x0A])

    def test_accumulator_explicit(self):
        assert assemble("ASL A") == bytes([0x0A])
        assert assemble("ror a") == bytes([0x6A])

    def test_lower_case_mnemonic(self):
        assert assemble("tax") == bytes([0xAA])


class TestImmediateMode:
    """Immediate form: '#' and a literal in 0-255."""

    def test_lda_hex(self):
        assert assemble("LDA #$05") == bytes([0xA9, 0x05])

    def test_lda_decimal(self):
        assert assemble("LDX #10") == bytes([0xA2, 0x0A])

    def test_limits(self):
        assert assemble("CMP #0") == bytes([0xC9, 0x00])
        assert assemble("CPY #255") == bytes([0xC0, 0xFF])


class TestAbsoluteMode:
    """Absolute form: literal address or label reference."""

    def test_jmp_hex(self):
        assert assemble("JMP $C000") == bytes([0x4C, 0x00, 0xC0])

    def test_jsr_decimal(self):
        assert assemble("JSR 65490") == bytes([0x20, 0xD2, 0xFF])

    def test_store(self):
        assert assemble("STA $D020") == bytes([0x8D, 0x20, 0xD0])

    def test_zero_page_address_uses_absolute_form(self):
        """Small addresses still get the 3-byte encoding."""
        assert assemble("LDA $10") == bytes([0xAD, 0x10, 0x00])
        assert assemble("LDA 255") == bytes([0xAD, 0xFF, 0x00])

    def test_read_modify_write(self):
        assert assemble("INC $D020") == bytes([0xEE, 0x20, 0xD0])
        assert assemble("ASL $0400") == bytes([0x0E, 0x00, 0x04])

    def test_backward_label(self):
        source = """
loop:   INC $D020
        JMP loop
"""
        assert assemble(source) == bytes([0xEE, 0x20, 0xD0, 0x4C, 0x0D, 0x08])

    def test_forward_label(self):
        """A forward reference resolves to the address right after the JMP."""
        source = """
        JMP loop
loop:   NOP
"""
        assert assemble(source) == bytes([0x4C, 0x10, 0x08, 0xEA])

    def test_label_only_line(self):
        source = """
start:
        NOP
        JMP start
"""
        assert assemble(source) == bytes([0xEA, 0x4C, 0x0D, 0x08])


# =============================================================================
# Pass State
# =============================================================================

class TestPassContext:
    """Test per-pass state."""

    def test_emit_advances_pc(self):
        ctx = PassContext(LABEL_PASS)
        assert ctx.pc == 0x0801
        ctx.emit(0xA9, 0x05)
        assert ctx.pc == 0x0803
        assert ctx.code == bytearray([0xA9, 0x05])

    def test_emit_word_little_endian(self):
        ctx = PassContext(EMIT_PASS)
        ctx.emit_word(0xC000)
        assert ctx.code == bytearray([0x00, 0xC0])

    def test_pc_wraps(self):
        ctx = PassContext(EMIT_PASS, pc=0xFFFF)
        ctx.emit(0xEA)
        assert ctx.pc == 0x0000

    def test_start_pass_resets(self):
        """Each pass starts at $0801 with only the stub emitted."""
        codegen = CodeGenerator()
        codegen.run_pass(LABEL_PASS, preprocess(["NOP", "NOP"]))
        ctx = codegen.start_pass(EMIT_PASS)
        assert ctx.pass_number == EMIT_PASS
        assert ctx.pc == 0x080D
        assert bytes(ctx.code) == STUB

    def test_assembler_start_pass(self):
        asm = Assembler()
        ctx = asm.start_pass(LABEL_PASS)
        assert ctx.is_label_pass
        assert ctx.pc == 0x080D

    def test_assembler_start_pass_keeps_run_state(self):
        """Only the pass state is reset; labels and errors of the run remain."""
        asm = Assembler()
        asm.assemble_string("here: NOP\nFOO")
        ctx = asm.start_pass(EMIT_PASS)
        assert asm.get_code() == STUB == bytes(ctx.code)
        assert asm.get_symbols() == {"here": 0x080D}
        assert asm.has_errors()

    def test_assemble_starts_its_own_run(self):
        """A manually started pass does not leak into the next assemble()."""
        asm = Assembler()
        asm.start_pass(EMIT_PASS).emit(0xEA)
        assert asm.assemble(["RTS"]) == STUB + bytes([0x60])


class TestPassInvariance:
    """Both passes emit the same number of bytes for every line."""

    SOURCE = [
        "start:  LDA #$00",
        "        JSR print",
        "        JMP start",
        "print:  ASL A",
        "        STA $0400",
        "        RTS",
    ]

    def test_same_length_and_pc(self):
        codegen = CodeGenerator()
        lines = preprocess(self.SOURCE)
        first = codegen.run_pass(LABEL_PASS, lines)
        second = codegen.run_pass(EMIT_PASS, lines)
        assert len(first.code) == len(second.code)
        assert first.pc == second.pc

    def test_only_label_bytes_differ(self):
        """Pass 0 emits $0000 where pass 1 emits label addresses."""
        codegen = CodeGenerator()
        lines = preprocess(self.SOURCE)
        first = bytes(codegen.run_pass(LABEL_PASS, lines).code)
        second = bytes(codegen.run_pass(EMIT_PASS, lines).code)

        # JSR print is a forward reference; JMP start is not.
        jsr = len(STUB) + 2
        assert first[jsr:jsr + 3] == bytes([0x20, 0x00, 0x00])
        assert second[jsr:jsr + 3] == bytes([0x20, 0x15, 0x08])
        assert first[:jsr] == second[:jsr]
        assert first[jsr + 3:] == second[jsr + 3:]

    def test_without_labels_passes_are_identical(self):
        codegen = CodeGenerator()
        lines = preprocess(["LDA #1", "STA $D021", "RTS"])
        first = bytes(codegen.run_pass(LABEL_PASS, lines).code)
        second = bytes(codegen.run_pass(EMIT_PASS, lines).code)
        assert first == second

    def test_generate_keeps_emission_pass_bytes(self):
        codegen = CodeGenerator()
        code = codegen.generate(preprocess(self.SOURCE))
        assert code == codegen.get_code()
        assert codegen.get_symbols() == {"start": 0x080D, "print": 0x0815}
