"""
MOS 6502 Instruction Set Definition
===================================

This module defines the documented MOS 6502 instruction set: for every
mnemonic, the opcode byte and cycle cost of each addressing mode it supports.
The 6502 in the Commodore 64 (a 6510) runs at roughly 1 MHz and stores 16-bit
values little-endian (least significant byte first).

Addressing Modes
----------------
Every mnemonic maps to a tuple of exactly twelve slots, one per addressing
mode, in this fixed order:

    IMMEDIATE    LDA #$05       2 bytes
    ZERO_PAGE    LDA $10        2 bytes
    ZERO_PAGE_X  LDA $10,X      2 bytes
    ZERO_PAGE_Y  LDX $10,Y      2 bytes
    ABSOLUTE     LDA $1234      3 bytes
    ABSOLUTE_X   LDA $1234,X    3 bytes
    ABSOLUTE_Y   LDA $1234,Y    3 bytes
    INDIRECT     JMP ($1234)    3 bytes
    INDIRECT_X   LDA ($10,X)    2 bytes
    INDIRECT_Y   LDA ($10),Y    2 bytes
    SINGLE       NOP / ASL A    1 byte
    BRANCH       BNE label      2 bytes (signed 8-bit displacement)

The order matters: the assembler tries modes in a fixed priority and the
disassembler identifies the mode of an opcode byte by its slot position.

Cycle Encoding
--------------
Each slot carries ``cycle_bits``: the base cycle count in the low 6 bits and
a 2-bit modifier above it:

    0  fixed cost
    1  +1 when an indexed access crosses a page
    2  +1 when a branch is taken
    3  +1 when a branch is taken, +1 more when it lands on another page

Reference
---------
- MOS MCS6500 Microcomputer Family Programming Manual
- http://www.6502.org/tutorials/6502opcodes.html
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    6502 addressing modes.

    The value of each member is its slot index in an instruction entry.
    """
    IMMEDIATE = 0
    ZERO_PAGE = 1
    ZERO_PAGE_X = 2
    ZERO_PAGE_Y = 3
    ABSOLUTE = 4
    ABSOLUTE_X = 5
    ABSOLUTE_Y = 6
    INDIRECT = 7
    INDIRECT_X = 8
    INDIRECT_Y = 9
    SINGLE = 10
    BRANCH = 11

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return self.name.lower().replace("_", " ")

    @property
    def operand_size(self) -> int:
        """Number of operand bytes following the opcode."""
        return _OPERAND_SIZES[self]


_OPERAND_SIZES = {
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
    AddressingMode.SINGLE: 0,
    AddressingMode.BRANCH: 1,
}


class CycleModifier(IntEnum):
    """Extra-cycle condition stored in bits 6-7 of cycle_bits."""
    FIXED = 0
    PAGE_CROSS = 1
    BRANCH_TAKEN = 2
    BRANCH_AND_PAGE = 3


# =============================================================================
# Opcode Slots
# =============================================================================

class Unsupported(Enum):
    """Sentinel type for an addressing mode the instruction does not have."""
    NOT_SUPPORTED = "not supported"

    def __repr__(self) -> str:
        return "NOT_SUPPORTED"


NOT_SUPPORTED = Unsupported.NOT_SUPPORTED


@dataclass(frozen=True)
class OpcodeSlot:
    """
    Encoding of one mnemonic in one addressing mode.

    Attributes:
        opcode: The opcode byte (0-255)
        cycle_bits: Base cycles in bits 0-5, CycleModifier in bits 6-7
    """
    opcode: int
    cycle_bits: int

    @property
    def base_cycles(self) -> int:
        return self.cycle_bits & 0x3F

    @property
    def modifier(self) -> CycleModifier:
        return CycleModifier(self.cycle_bits >> 6)

    def __repr__(self) -> str:
        return f"OpcodeSlot(opcode=${self.opcode:02X}, cycles={format_cycles(self.cycle_bits)})"


Slot = Union[OpcodeSlot, Unsupported]


@dataclass(frozen=True)
class ReverseEntry:
    """What an opcode byte decodes to."""
    mnemonic: str
    mode: AddressingMode
    cycle_bits: int


def _op(opcode: int, cycles: int,
        modifier: CycleModifier = CycleModifier.FIXED) -> OpcodeSlot:
    return OpcodeSlot(opcode, cycles | (modifier << 6))


def _page(opcode: int, cycles: int) -> OpcodeSlot:
    return _op(opcode, cycles, CycleModifier.PAGE_CROSS)


def _branch(opcode: int) -> OpcodeSlot:
    return _op(opcode, 2, CycleModifier.BRANCH_AND_PAGE)


def _single(opcode: int, cycles: int = 2) -> tuple[Slot, ...]:
    return (_,) * 10 + (_op(opcode, cycles), _)


def _branch_only(opcode: int) -> tuple[Slot, ...]:
    return (_,) * 11 + (_branch(opcode),)


_ = NOT_SUPPORTED


# =============================================================================
# Instruction Table
# =============================================================================
# Key: mnemonic
# Value: 12 slots in AddressingMode order
#
#        IMM             ZP            ZPX           ZPY           ABS
#        ABSX            ABSY          IND           INDX          INDY
#        SNGL            BRA
# =============================================================================

INSTRUCTION_TABLE: dict[str, tuple[Slot, ...]] = {
    # Load / store
    "LDA": (_op(0xA9, 2), _op(0xA5, 3), _op(0xB5, 4), _, _op(0xAD, 4),
            _page(0xBD, 4), _page(0xB9, 4), _, _op(0xA1, 6), _page(0xB1, 5),
            _, _),
    "LDX": (_op(0xA2, 2), _op(0xA6, 3), _, _op(0xB6, 4), _op(0xAE, 4),
            _, _page(0xBE, 4), _, _, _,
            _, _),
    "LDY": (_op(0xA0, 2), _op(0xA4, 3), _op(0xB4, 4), _, _op(0xAC, 4),
            _page(0xBC, 4), _, _, _, _,
            _, _),
    "STA": (_, _op(0x85, 3), _op(0x95, 4), _, _op(0x8D, 4),
            _op(0x9D, 5), _op(0x99, 5), _, _op(0x81, 6), _op(0x91, 6),
            _, _),
    "STX": (_, _op(0x86, 3), _, _op(0x96, 4), _op(0x8E, 4),
            _, _, _, _, _,
            _, _),
    "STY": (_, _op(0x84, 3), _op(0x94, 4), _, _op(0x8C, 4),
            _, _, _, _, _,
            _, _),

    # Arithmetic and logic
    "ADC": (_op(0x69, 2), _op(0x65, 3), _op(0x75, 4), _, _op(0x6D, 4),
            _page(0x7D, 4), _page(0x79, 4), _, _op(0x61, 6), _page(0x71, 5),
            _, _),
    "SBC": (_op(0xE9, 2), _op(0xE5, 3), _op(0xF5, 4), _, _op(0xED, 4),
            _page(0xFD, 4), _page(0xF9, 4), _, _op(0xE1, 6), _page(0xF1, 5),
            _, _),
    "AND": (_op(0x29, 2), _op(0x25, 3), _op(0x35, 4), _, _op(0x2D, 4),
            _page(0x3D, 4), _page(0x39, 4), _, _op(0x21, 6), _page(0x31, 5),
            _, _),
    "ORA": (_op(0x09, 2), _op(0x05, 3), _op(0x15, 4), _, _op(0x0D, 4),
            _page(0x1D, 4), _page(0x19, 4), _, _op(0x01, 6), _page(0x11, 5),
            _, _),
    "EOR": (_op(0x49, 2), _op(0x45, 3), _op(0x55, 4), _, _op(0x4D, 4),
            _page(0x5D, 4), _page(0x59, 4), _, _op(0x41, 6), _page(0x51, 5),
            _, _),
    "CMP": (_op(0xC9, 2), _op(0xC5, 3), _op(0xD5, 4), _, _op(0xCD, 4),
            _page(0xDD, 4), _page(0xD9, 4), _, _op(0xC1, 6), _page(0xD1, 5),
            _, _),
    "CPX": (_op(0xE0, 2), _op(0xE4, 3), _, _, _op(0xEC, 4),
            _, _, _, _, _,
            _, _),
    "CPY": (_op(0xC0, 2), _op(0xC4, 3), _, _, _op(0xCC, 4),
            _, _, _, _, _,
            _, _),
    "BIT": (_, _op(0x24, 3), _, _, _op(0x2C, 4),
            _, _, _, _, _,
            _, _),

    # Read-modify-write
    "INC": (_, _op(0xE6, 5), _op(0xF6, 6), _, _op(0xEE, 6),
            _op(0xFE, 7), _, _, _, _,
            _, _),
    "DEC": (_, _op(0xC6, 5), _op(0xD6, 6), _, _op(0xCE, 6),
            _op(0xDE, 7), _, _, _, _,
            _, _),
    "ASL": (_, _op(0x06, 5), _op(0x16, 6), _, _op(0x0E, 6),
            _op(0x1E, 7), _, _, _, _,
            _op(0x0A, 2), _),
    "LSR": (_, _op(0x46, 5), _op(0x56, 6), _, _op(0x4E, 6),
            _op(0x5E, 7), _, _, _, _,
            _op(0x4A, 2), _),
    "ROL": (_, _op(0x26, 5), _op(0x36, 6), _, _op(0x2E, 6),
            _op(0x3E, 7), _, _, _, _,
            _op(0x2A, 2), _),
    "ROR": (_, _op(0x66, 5), _op(0x76, 6), _, _op(0x6E, 6),
            _op(0x7E, 7), _, _, _, _,
            _op(0x6A, 2), _),

    # Jumps and subroutines
    "JMP": (_, _, _, _, _op(0x4C, 3),
            _, _, _op(0x6C, 5), _, _,
            _, _),
    "JSR": (_, _, _, _, _op(0x20, 6),
            _, _, _, _, _,
            _, _),
    "RTS": _single(0x60, 6),
    "RTI": _single(0x40, 6),
    "BRK": _single(0x00, 7),

    # Branches
    "BPL": _branch_only(0x10),
    "BMI": _branch_only(0x30),
    "BVC": _branch_only(0x50),
    "BVS": _branch_only(0x70),
    "BCC": _branch_only(0x90),
    "BCS": _branch_only(0xB0),
    "BNE": _branch_only(0xD0),
    "BEQ": _branch_only(0xF0),

    # Flags
    "CLC": _single(0x18),
    "SEC": _single(0x38),
    "CLI": _single(0x58),
    "SEI": _single(0x78),
    "CLV": _single(0xB8),
    "CLD": _single(0xD8),
    "SED": _single(0xF8),

    # Register transfers and counters
    "TAX": _single(0xAA),
    "TXA": _single(0x8A),
    "TAY": _single(0xA8),
    "TYA": _single(0x98),
    "TSX": _single(0xBA),
    "TXS": _single(0x9A),
    "INX": _single(0xE8),
    "DEX": _single(0xCA),
    "INY": _single(0xC8),
    "DEY": _single(0x88),

    # Stack
    "PHA": _single(0x48, 3),
    "PLA": _single(0x68, 4),
    "PHP": _single(0x08, 3),
    "PLP": _single(0x28, 4),

    "NOP": _single(0xEA),
}


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

MNEMONICS: frozenset[str] = frozenset(INSTRUCTION_TABLE)

BRANCH_INSTRUCTIONS: frozenset[str] = frozenset({
    mnemonic for mnemonic, slots in INSTRUCTION_TABLE.items()
    if slots[AddressingMode.BRANCH.value] is not NOT_SUPPORTED
})


def _build_reverse_table() -> dict[int, ReverseEntry]:
    """
    Build reverse lookup table: opcode byte -> (mnemonic, mode, cycle_bits).

    The 6502 opcode space has no collisions across mnemonics, so every byte
    maps to at most one entry.
    """
    reverse: dict[int, ReverseEntry] = {}
    for mnemonic, slots in INSTRUCTION_TABLE.items():
        for mode in AddressingMode:
            slot = slots[mode.value]
            if slot is NOT_SUPPORTED:
                continue
            if slot.opcode in reverse:
                raise ValueError(
                    f"opcode ${slot.opcode:02X} assigned to both "
                    f"{reverse[slot.opcode].mnemonic} and {mnemonic}"
                )
            reverse[slot.opcode] = ReverseEntry(mnemonic, mode, slot.cycle_bits)
    return reverse


REVERSE_TABLE: dict[int, ReverseEntry] = _build_reverse_table()


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup(mnemonic: str) -> Optional[tuple[Slot, ...]]:
    """
    Look up the twelve addressing-mode slots of a mnemonic.

    Args:
        mnemonic: The instruction mnemonic (any case)

    Returns:
        Tuple of OpcodeSlot/NOT_SUPPORTED in AddressingMode order,
        or None if the mnemonic is not a 6502 instruction
    """
    return INSTRUCTION_TABLE.get(mnemonic.upper())


def reverse_lookup(opcode: int) -> Optional[ReverseEntry]:
    """Look up which instruction and addressing mode an opcode byte encodes."""
    return REVERSE_TABLE.get(opcode)


def get_slot(mnemonic: str, mode: AddressingMode) -> Optional[OpcodeSlot]:
    """
    Look up the encoding of a mnemonic in one addressing mode.

    Returns:
        The OpcodeSlot, or None if the mnemonic is unknown or lacks the mode
    """
    slots = lookup(mnemonic)
    if slots is None:
        return None
    slot = slots[mode.value]
    return None if slot is NOT_SUPPORTED else slot


def get_valid_modes(mnemonic: str) -> list[AddressingMode]:
    """Get all addressing modes an instruction has an opcode for."""
    slots = lookup(mnemonic)
    if slots is None:
        return []
    return [mode for mode in AddressingMode if slots[mode.value] is not NOT_SUPPORTED]


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a 6502 instruction."""
    return mnemonic.upper() in MNEMONICS


def is_branch_instruction(mnemonic: str) -> bool:
    """Check if an instruction is a relative branch."""
    return mnemonic.upper() in BRANCH_INSTRUCTIONS


def format_cycles(cycle_bits: int, crosses_page: bool = False) -> str:
    """
    Format the cycle cost of an instruction for display.

    Args:
        cycle_bits: Base cycles in bits 0-5, CycleModifier in bits 6-7
        crosses_page: Whether a branch target lies on another page
                      (only meaningful for BRANCH_AND_PAGE)

    Returns:
        "n", "n/n+1" or "n+1/n+2" with the numbers filled in

    Example:
        >>> format_cycles(4 | (3 << 6), crosses_page=True)
        '5/6'
    """
    cycles = cycle_bits & 0x3F
    modifier = cycle_bits >> 6

    if modifier in (CycleModifier.PAGE_CROSS, CycleModifier.BRANCH_TAKEN):
        return f"{cycles}/{cycles + 1}"
    if modifier == CycleModifier.BRANCH_AND_PAGE:
        if crosses_page:
            return f"{cycles + 1}/{cycles + 2}"
        return f"{cycles}/{cycles + 1}"
    return f"{cycles}"
