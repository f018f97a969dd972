"""
C64 SDK - 6502 Cross-Development Tools for the Commodore 64
===========================================================

This package provides a small toolchain for writing machine code programs
for the Commodore 64.

The Commodore 64 uses a MOS 6510 CPU (a 6502 with an I/O port) running at
roughly 1 MHz. Programs are distributed as ".prg" files: a 2-byte load
address followed by the memory image.

Main Components
---------------
- **assembler**: 6502 assembler (c64asm)
    Converts assembly source files (.asm) to auto-running .prg files

- **disassembler**: 6502 disassembler (c64disasm)
    Lists the instructions of a .prg file, with optional cycle counts
    and label annotations

- **cpu**: MOS 6502 instruction table shared by both tools

Quick Start
-----------
Assemble a program:
    >>> from c64_sdk.assembler import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("hello.asm")
    >>> asm.write_prg("hello.prg")

Disassemble it again:
    >>> from c64_sdk.disassembler import disassemble
    >>> for line in disassemble(asm.get_prg(), asm.get_labels()):
    ...     print(line)

Or use the command-line tools:
    $ c64asm hello.asm -o hello.prg
    $ c64disasm hello.prg --cycles

Reference Documentation
-----------------------
- 6502 Instruction Set: http://www.6502.org/tutorials/6502opcodes.html
- C64 Memory Map: https://sta.c64.org/cbm64mem.html

Version History
---------------
1.0.0 - Initial release with assembler and disassembler
"""

__version__ = "1.0.0"
__author__ = "C64 SDK Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from c64_sdk.assembler import Assembler, assemble, assemble_file
from c64_sdk.config import AssemblerConfig, LOAD_ADDRESS, START_ADDRESS
from c64_sdk.disassembler import Disassembler, DisassemblerOptions, disassemble
from c64_sdk.errors import (
    C64Error,
    AssemblerError,
    AssemblySyntaxError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    UnknownMnemonicError,
    AddressingModeError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblerConfig",
    "LOAD_ADDRESS",
    "START_ADDRESS",
    # Disassembler
    "Disassembler",
    "DisassemblerOptions",
    "disassemble",
    # Exception hierarchy
    "C64Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "UnknownMnemonicError",
    "AddressingModeError",
]
