"""
C64 SDK Disassembler Module
===========================

This module provides disassembly of MOS 6502 machine code stored in
Commodore 64 program files (.prg), with optional cycle counts and label
annotations.

Usage:
    from c64_sdk.disassembler import disassemble, DisassemblerOptions

    lines = disassemble(prg_bytes, options=DisassemblerOptions(show_cycles=True))
"""

from .mos6502 import (
    Disassembler,
    DisassemblerOptions,
    DecodedInstruction,
    ByteRun,
    disassemble,
    chunk_bytes,
    code_ranges_predicate,
    branch_target,
    crosses_page,
)

__all__ = [
    "Disassembler",
    "DisassemblerOptions",
    "DecodedInstruction",
    "ByteRun",
    "disassemble",
    "chunk_bytes",
    "code_ranges_predicate",
    "branch_target",
    "crosses_page",
]
