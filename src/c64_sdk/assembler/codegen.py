"""
6502 Code Generator
===================

This module turns normalized source lines into 6502 machine code. It
implements a two-pass assembly process over the same list of lines:

Pass 0 (Label Collection)
-------------------------
- Emit every instruction with its final size
- Record each ``label:`` definition at the current program counter
- Label references emit a $0000 placeholder

Pass 1 (Code Emission)
----------------------
- Emit the same bytes again, this time with label addresses filled in
- Report every defect in the source

Each pass starts from a fresh PassContext: the program counter is reset to
$0801 and the auto-run stub is emitted first. Every supported form has the
same size on both passes, so labels collected on pass 0 are exact.

Encodable Forms
---------------
Only three operand shapes are encoded, tried in this order:

    single     NOP, ASL, ASL A     opcode
    immediate  LDA #$05            opcode, value
    absolute   JMP $C000, JSR sub  opcode, low byte, high byte

Everything else (zero page, indexed, indirect, relative branches) is
reported as an addressing mode error even when the opcode exists.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional
import logging

from c64_sdk.config import LOAD_ADDRESS, START_ADDRESS
from c64_sdk.errors import (
    AssemblerError,
    AddressingModeError,
    DuplicateSymbolError,
    ErrorCollector,
    SourceLocation,
    UndefinedSymbolError,
    UnknownMnemonicError,
)
from c64_sdk.assembler.labels import LabelTable
from c64_sdk.assembler.parser import (
    SourceLine,
    is_accumulator,
    parse_immediate,
    parse_instruction,
    parse_number,
    parse_symbol,
    split_label,
)
from c64_sdk.cpu import AddressingMode, NOT_SUPPORTED, get_valid_modes, lookup

logger = logging.getLogger(__name__)


LABEL_PASS = 0
EMIT_PASS = 1


# =============================================================================
# Auto-run Stub
# =============================================================================

def build_autorun_stub(start_address: int = START_ADDRESS) -> bytes:
    """
    Build the tokenized BASIC line ``0 SYS <start_address>``.

    The address is written as ASCII digits with leading zeros suppressed.
    For the default start address of $080D the result is 12 bytes:

        0C 08 00 00 9E 32 30 36 31 00 00 00

    Args:
        start_address: Address the SYS statement jumps to

    Returns:
        The stub bytes
    """
    stub = bytearray([0x0C, 0x08, 0x00, 0x00, 0x9E])
    for divisor in (10000, 1000, 100, 10, 1):
        if start_address >= divisor:
            stub.append(0x30 + (start_address // divisor) % 10)
    stub.extend([0x00, 0x00, 0x00])
    return bytes(stub)


# =============================================================================
# Pass State
# =============================================================================

@dataclass
class PassContext:
    """
    Mutable state of one assembly pass.

    Attributes:
        pass_number: LABEL_PASS or EMIT_PASS
        pc: Address of the next byte to be emitted
        code: Bytes emitted so far in this pass
    """
    pass_number: int
    pc: int = LOAD_ADDRESS
    code: bytearray = field(default_factory=bytearray)

    @property
    def is_label_pass(self) -> bool:
        return self.pass_number == LABEL_PASS

    def emit(self, *values: int) -> None:
        """Append bytes, advancing the program counter by one per byte."""
        for value in values:
            self.code.append(value & 0xFF)
            self.pc = (self.pc + 1) & 0xFFFF

    def emit_word(self, value: int) -> None:
        """Append a 16-bit value, little-endian."""
        self.emit(value & 0xFF, (value >> 8) & 0xFF)


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates 6502 machine code from normalized source lines.

    The code generator maintains:
    - The label table shared by both passes
    - The context of the pass currently running
    - Error collection for batch reporting

    Usage:
        codegen = CodeGenerator()
        codegen.generate(preprocess(source.splitlines()))
        code = codegen.get_code()
    """

    def __init__(self, filename: str = "<input>",
                 errors: Optional[ErrorCollector] = None):
        """
        Initialize the code generator.

        Args:
            filename: Name used in error locations
            errors: Collector for diagnostics (a new one if not given)
        """
        self.filename = filename
        self.labels = LabelTable()
        self.errors = errors if errors is not None else ErrorCollector()
        self.context = PassContext(LABEL_PASS)
        self._current: Optional[SourceLine] = None

    # =========================================================================
    # Public Interface
    # =========================================================================

    def start_pass(self, pass_number: int) -> PassContext:
        """
        Begin a pass: reset the program counter and emit the auto-run stub.

        Returns:
            The new PassContext
        """
        logger.debug(f"Starting pass {pass_number}")
        self.context = PassContext(pass_number)
        self.context.emit(*build_autorun_stub())
        return self.context

    def generate(self, lines: Iterable[SourceLine]) -> bytes:
        """
        Run both passes over the lines.

        Args:
            lines: Normalized source lines (see parser.preprocess)

        Returns:
            The bytes of the emission pass (stub followed by code)
        """
        lines = list(lines)
        self.labels = LabelTable()
        for pass_number in (LABEL_PASS, EMIT_PASS):
            self.run_pass(pass_number, lines)
        return self.get_code()

    def run_pass(self, pass_number: int, lines: Iterable[SourceLine]) -> PassContext:
        """Run a single pass, collecting errors instead of stopping at them."""
        context = self.start_pass(pass_number)
        for line in lines:
            try:
                self.assemble_line(line)
            except AssemblerError as e:
                self._report(e)
        self._current = None
        logger.debug(f"Pass {pass_number} done: {len(context.code)} bytes, "
                     f"pc=${context.pc:04X}")
        return context

    def assemble_line(self, line: SourceLine) -> None:
        """
        Assemble one normalized line into the current pass.

        Raises:
            AssemblerError: For any defect in the line; bytes already
                            emitted for the line stay emitted
        """
        self._current = line
        context = self.context
        logger.debug(f"assembling line {line.line_no}: {line.text}")

        label, rest = split_label(line.text)
        if label is not None:
            if context.is_label_pass:
                self.labels.add(label, context.pc, line.line_no,
                                location=self._location(),
                                source_line=line.text)
            else:
                existing = self.labels.find(label)
                if existing is not None and existing.line != line.line_no:
                    # Rejected redefinition, already reported on pass 0.
                    return

        mnemonic, operand = parse_instruction(rest, self._location(), line.text)
        if mnemonic is None:
            return

        slots = lookup(mnemonic)
        if slots is None:
            raise UnknownMnemonicError(mnemonic, self._location(), line.text)

        if (self._try_single(slots, operand)
                or self._try_immediate(slots, operand)
                or self._try_absolute(mnemonic, slots, operand)):
            return

        raise AddressingModeError(
            mnemonic, operand, self._location(), line.text,
            valid_modes=[str(m) for m in get_valid_modes(mnemonic)],
        )

    def get_code(self) -> bytes:
        """Return the bytes emitted by the most recent pass."""
        return bytes(self.context.code)

    def get_symbols(self) -> dict[str, int]:
        """Return label name -> address."""
        return self.labels.as_dict()

    def has_errors(self) -> bool:
        return self.errors.has_errors()

    def get_error_report(self) -> str:
        return self.errors.report()

    # =========================================================================
    # Addressing Mode Encoders
    # =========================================================================

    def _try_single(self, slots, operand: Optional[str]) -> bool:
        """Implied or accumulator form: ``NOP``, ``ROL``, ``ROL A``."""
        slot = slots[AddressingMode.SINGLE.value]
        if slot is NOT_SUPPORTED:
            return False
        if operand is not None and not is_accumulator(operand):
            return False
        self.context.emit(slot.opcode)
        return True

    def _try_immediate(self, slots, operand: Optional[str]) -> bool:
        """Immediate form: ``#`` followed by a literal in 0-255."""
        slot = slots[AddressingMode.IMMEDIATE.value]
        if slot is NOT_SUPPORTED or operand is None:
            return False
        value = parse_immediate(operand)
        if value is None or value > 0xFF:
            return False
        self.context.emit(slot.opcode, value)
        return True

    def _try_absolute(self, mnemonic: str, slots, operand: Optional[str]) -> bool:
        """
        Absolute form: a literal in 0-65535 or a label reference.

        Always the 3-byte encoding, even for addresses below $0100.

        Raises:
            UndefinedSymbolError: On the emission pass, for an unknown label;
                                  the placeholder is emitted first
        """
        slot = slots[AddressingMode.ABSOLUTE.value]
        if slot is NOT_SUPPORTED or operand is None:
            return False

        value = parse_number(operand)
        if value is not None:
            if value > 0xFFFF:
                return False
            self.context.emit(slot.opcode)
            self.context.emit_word(value)
            return True

        symbol = parse_symbol(operand)
        if symbol is None:
            return False

        label = self.labels.find(symbol)
        self.context.emit(slot.opcode)
        self.context.emit_word(label.address if label else 0x0000)

        if label is None and not self.context.is_label_pass:
            raise UndefinedSymbolError(
                symbol,
                location=self._location(),
                source_line=self._current.text,
                similar_symbols=self.labels.similar(symbol),
            )
        return True

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _location(self) -> Optional[SourceLocation]:
        if self._current is None:
            return None
        return SourceLocation(self.filename, self._current.line_no)

    def _report(self, error: AssemblerError) -> None:
        """
        Record a diagnostic.

        Duplicate labels can only be detected on the label pass; everything
        else is recorded on the emission pass so each defect appears once.
        Only a DEBUG trace is logged; callers show the collected report.
        """
        if (self.context.pass_number != EMIT_PASS
                and not isinstance(error, DuplicateSymbolError)):
            return
        logger.debug(f"collected: {error}")
        self.errors.add(error)
