"""
C64 SDK Error Hierarchy
=======================

This module defines the exception hierarchy for the entire C64 SDK.
All exceptions inherit from C64Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
C64Error (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - line is not "mnemonic [operand]"
    ├── UndefinedSymbolError - reference to undefined label
    ├── DuplicateSymbolError - label defined multiple times
    ├── UnknownMnemonicError - mnemonic not in the instruction table
    └── AddressingModeError - operand fits no implemented addressing mode

The disassembler has no error states: any byte it cannot decode is
emitted as a raw hex dump instead.

Error messages follow this format:
    filename:line: error: description
        source_line_text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class C64Error(Exception):
    """
    Base exception for all C64 SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            assembler.assemble_file("program.asm")
        except C64Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a line in a source file for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed, counting blank and comment lines)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' for error messages."""
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(C64Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The normalized source text of the line (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """Line number of the error, or None when unknown."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.asm:15: error: undefined symbol 'prnt'
                JSR prnt
            hint: did you mean 'print'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when a line is neither a bare mnemonic nor a mnemonic
    followed by whitespace and an operand.

    Examples:
        - LDA,#$05
        - JMP!loop
    """
    pass


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined label.

    Raised during the emission pass when an absolute operand names a
    label that the label-collecting pass never saw. The assembler still
    emits a placeholder address so that later addresses stay correct.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        # Auto-generate hint if similar symbols found
        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label defined multiple times.

    Raised when a label is defined more than once in the source code.
    Carries the line of the original definition.
    """

    def __init__(
        self,
        symbol: str,
        original_line: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_line = original_line

        super().__init__(
            f"label '{symbol}' already defined on line {original_line}",
            location=location,
            source_line=source_line,
        )


class UnknownMnemonicError(AssemblerError):
    """Mnemonic is not a 6502 instruction."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        super().__init__(
            f"unknown instruction '{mnemonic}'",
            location=location,
            source_line=source_line,
        )


class AddressingModeError(AssemblerError):
    """
    Operand does not fit any addressing mode the encoder implements.

    The encoder only produces the single (implied/accumulator), immediate
    and absolute forms. Everything else, including relative branches,
    ends up here even when the instruction table has an opcode for it.

    Example:
        LDA $10,X   ; indexed modes are not encoded
        BNE loop    ; relative branches are not encoded
    """

    def __init__(
        self,
        mnemonic: str,
        operand: Optional[str],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_modes: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.operand = operand
        self.valid_modes = valid_modes or []

        hint = None
        if self.valid_modes:
            modes_str = ", ".join(self.valid_modes)
            hint = f"{mnemonic} has opcodes for: {modes_str}"

        if operand:
            message = f"cannot encode '{mnemonic} {operand}'"
        else:
            message = f"'{mnemonic}' requires an operand"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The assembler uses this to continue processing after encountering
    an error, collecting all errors before reporting them together.
    Assembly never stops because of an error; once max_errors is reached
    further errors are only counted.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(UndefinedSymbolError(...))

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: Optional[int] = None):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to keep (None keeps all of them)
        """
        self.errors: list[AssemblerError] = []
        self.max_errors = max_errors
        self.dropped = 0

    def add(self, error: AssemblerError) -> None:
        """Add an error to the collection."""
        if self.max_errors is not None and len(self.errors) >= self.max_errors:
            self.dropped += 1
            return
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of errors seen, including dropped ones."""
        return len(self.errors) + self.dropped

    def report(self) -> str:
        """
        Format all errors for display.

        Returns:
            Formatted string with every kept error and a summary line
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")  # Blank line between errors

        if self.dropped:
            lines.append(f"({self.dropped} more errors not shown)")

        count = self.error_count()
        error_word = "error" if count == 1 else "errors"
        lines.append(f"\n{count} {error_word}")

        return "\n".join(lines)
