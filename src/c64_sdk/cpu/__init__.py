"""
C64 SDK CPU Package
===================

This package contains the MOS 6502 architecture definitions shared by the
assembler (which encodes instructions) and the disassembler (which decodes
them), so both sides read the same opcode table.

Modules:
    mos6502: Instruction table, addressing modes, cycle metadata and
             lookup helpers.

Usage:
    from c64_sdk.cpu import (
        AddressingMode,
        INSTRUCTION_TABLE,
        lookup,
        reverse_lookup,
    )
"""

from c64_sdk.cpu.mos6502 import (
    # Core types
    AddressingMode,
    CycleModifier,
    OpcodeSlot,
    ReverseEntry,
    NOT_SUPPORTED,
    # Instruction database
    INSTRUCTION_TABLE,
    REVERSE_TABLE,
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
    # Lookup functions
    lookup,
    reverse_lookup,
    get_slot,
    get_valid_modes,
    is_valid_instruction,
    is_branch_instruction,
    format_cycles,
)

__all__ = [
    "AddressingMode",
    "CycleModifier",
    "OpcodeSlot",
    "ReverseEntry",
    "NOT_SUPPORTED",
    "INSTRUCTION_TABLE",
    "REVERSE_TABLE",
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    "lookup",
    "reverse_lookup",
    "get_slot",
    "get_valid_modes",
    "is_valid_instruction",
    "is_branch_instruction",
    "format_cycles",
]
