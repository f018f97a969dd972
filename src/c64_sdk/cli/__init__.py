"""
C64 SDK Command-Line Interface
==============================

This package provides command-line tools for the C64 SDK:

- **c64asm**: 6502 assembler producing .prg files
- **c64disasm**: 6502 disassembler for .prg files

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c64asm", "c64disasm"]
