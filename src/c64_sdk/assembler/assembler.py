"""
6502 Assembler - Main Interface
===============================

This module provides the main Assembler class, which is the primary interface
for assembling 6502 source code into Commodore 64 program files.

Example Usage
-------------
>>> from c64_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
... start:
...     LDA #$05
...     JSR $FFD2   ; CHROUT
...     JMP start
... ''')
>>>
>>> code = asm.get_code()          # stub + code, as loaded at $0801
>>> asm.write_prg("hello.prg")     # same, with the 2-byte load address

Command-Line Usage
------------------
    $ c64asm hello.asm -o hello.prg

Options:
    -o, --output FILE      Output .prg file
    -b, --binary FILE      Also write the raw image without load address
    -d, --disassemble      Print the disassembly of the result
    -v, --verbose          Verbose output

Error Handling
--------------
Assembly never stops at an error. Every defective line is reported and
skipped (or assembled with a placeholder address), and a best-effort image
is produced. Check has_errors() after assembling.
"""

from pathlib import Path
from typing import Iterable, Optional
import logging

from c64_sdk.config import AssemblerConfig
from c64_sdk.errors import AssemblerError, ErrorCollector
from c64_sdk.assembler.codegen import CodeGenerator, PassContext
from c64_sdk.assembler.labels import Label
from c64_sdk.assembler.parser import preprocess

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main 6502 assembler class.

    Each call to one of the assemble methods is an independent run with a
    fresh label table and error list; results of the last run are available
    through the getters.

    Attributes:
        config: Active AssemblerConfig
    """

    def __init__(self, config: Optional[AssemblerConfig] = None,
                 verbose: bool = False, max_errors: Optional[int] = None):
        """
        Initialize the assembler.

        Args:
            config: Full configuration; if given, verbose and max_errors
                    are ignored
            verbose: Log progress at INFO level
            max_errors: Maximum number of diagnostics to keep
        """
        if config is None:
            config = AssemblerConfig(max_errors=max_errors, verbose=verbose)
        self.config = config
        self._codegen = self._new_codegen("<input>")

    def _new_codegen(self, filename: str) -> CodeGenerator:
        return CodeGenerator(filename, ErrorCollector(self.config.max_errors))

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def start_pass(self, pass_number: int) -> PassContext:
        """
        Reset per-pass state: program counter back to $0801, empty output,
        auto-run stub emitted.

        This only resets and exposes the pass state of the current run; the
        label table and collected errors are kept, and no lines are fed.
        assemble() starts a fresh run and begins each of its passes itself,
        so calling this first has no effect on it.

        Returns:
            The new PassContext, also reflected by get_code()
        """
        return self._codegen.start_pass(pass_number)

    def assemble(self, lines: Iterable[str], filename: str = "<input>") -> bytes:
        """
        Assemble a sequence of raw source lines.

        Args:
            lines: Source lines (trailing newlines are ignored)
            filename: Virtual filename for error messages

        Returns:
            Stub and code bytes as loaded at $0801 (no load address)
        """
        source_lines = preprocess(lines)
        self._codegen = self._new_codegen(filename)

        if self.config.verbose:
            logger.info(f"Assembling {filename} ({len(source_lines)} lines)")

        code = self._codegen.generate(source_lines)

        count = self._codegen.errors.error_count()
        if count:
            logger.info(f"{filename}: {count} error(s)")
        if self.config.verbose:
            logger.info(f"Generated {len(code)} bytes, "
                        f"{len(self._codegen.labels)} labels")
        return code

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Stub and code bytes (no load address)
        """
        return self.assemble(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Stub and code bytes (no load address)

        Raises:
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """
        Get the bytes of the last run, starting with the auto-run stub.

        Returns:
            Memory image from $0801 onward
        """
        return self._codegen.get_code()

    def get_prg(self) -> bytes:
        """
        Get the .prg file image: load address $0801 (little-endian) then code.
        """
        load = self.config.load_address
        return bytes([load & 0xFF, load >> 8]) + self.get_code()

    def get_labels(self) -> list[Label]:
        """Get the labels of the last run in definition order."""
        return list(self._codegen.labels)

    def get_symbols(self) -> dict[str, int]:
        """
        Get the label table.

        Returns:
            Dictionary mapping label names to addresses
        """
        return self._codegen.get_symbols()

    def write_prg(self, filepath: str | Path) -> None:
        """
        Write the .prg file.

        Args:
            filepath: Output file path
        """
        data = self.get_prg()
        Path(filepath).write_bytes(data)
        logger.info(f"Wrote {len(data)} bytes to {filepath}")

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write raw binary output (memory image only, no load address).

        Args:
            filepath: Output file path
        """
        code = self.get_code()
        Path(filepath).write_bytes(code)
        logger.info(f"Wrote {len(code)} bytes to {filepath}")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """
        Check if the last run produced errors.

        Returns:
            True if errors occurred
        """
        return self._codegen.has_errors()

    def get_errors(self) -> list[AssemblerError]:
        """Get the diagnostics of the last run in the order they were found."""
        return list(self._codegen.errors.errors)

    def get_error_report(self) -> str:
        """
        Get formatted error report.

        Returns:
            Error report string
        """
        return self._codegen.get_error_report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        Stub and code bytes (no load address)

    Raises:
        AssemblerError: If the source has errors; the message holds the
                        full report
    """
    asm = Assembler()
    code = asm.assemble_string(source, filename)
    _raise_on_errors(asm)
    return code


def assemble_file(filepath: str | Path) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file

    Returns:
        Stub and code bytes (no load address)

    Raises:
        AssemblerError: If the source has errors
    """
    asm = Assembler()
    code = asm.assemble_file(filepath)
    _raise_on_errors(asm)
    return code


def _raise_on_errors(asm: Assembler) -> None:
    if asm.has_errors():
        raise AssemblerError(
            f"Assembly failed with {len(asm.get_errors())} errors:\n\n"
            f"{asm.get_error_report()}"
        )
