"""
MOS 6502 Disassembler
=====================

Disassembles Commodore 64 program files (.prg) into human-readable
assembly language. This is the inverse operation of the assembler's code
generation, and it reads the same instruction table.

Input Layout
------------
The buffer starts with the 2-byte little-endian load address; every byte
after it is placed at consecutive addresses from there.

Output Layout
-------------
One line per decoded instruction, raw bytes padded to three columns:

    080D: A9 05       LDA #$05
    080F: 4C 0D 08    JMP $080D                    ; 3 start

Bytes that are not decoded (unknown opcodes, data ranges, a truncated
instruction at the end) are printed as a hex dump:

    0812: FF

Usage:
    disasm = Disassembler(prg_bytes, labels, DisassemblerOptions(show_cycles=True))
    for line in disasm.disassemble():
        print(line)

The disassembler never raises on its input; any byte it cannot decode
is dumped.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence, Union

from c64_sdk.cpu import AddressingMode, format_cycles, reverse_lookup


# =============================================================================
# Options
# =============================================================================

@dataclass
class DisassemblerOptions:
    """
    Output options.

    Attributes:
        show_labels: Append the name of the label defined at each address
        show_cycles: Append the cycle cost of each instruction
        is_instruction: Predicate telling which addresses hold code; bytes
                        at other addresses are dumped (None = all code).
                        Setting it also widens the layout for data dumps.
    """
    show_labels: bool = False
    show_cycles: bool = False
    is_instruction: Optional[Callable[[int], bool]] = None


def code_ranges_predicate(ranges: Iterable[tuple[int, int]]) -> Callable[[int], bool]:
    """
    Build an is_instruction predicate from address ranges.

    Args:
        ranges: (start, end) pairs, both ends inclusive

    Returns:
        Function that is True for addresses inside any of the ranges
    """
    ranges = [(start, end) for start, end in ranges]

    def is_instruction(address: int) -> bool:
        return any(start <= address <= end for start, end in ranges)

    return is_instruction


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class DecodedInstruction:
    """
    A single disassembled 6502 instruction.

    Attributes:
        address: Memory address of the opcode
        raw_bytes: Opcode and operand bytes (1-3)
        mnemonic: Instruction mnemonic (e.g. "LDA")
        mode: Addressing mode the opcode encodes
        operand_text: Formatted operand, empty for single-byte forms
        cycles: Formatted cycle cost (e.g. "4/5")
        label: Name of the label at this address, if any
    """
    address: int
    raw_bytes: bytes
    mnemonic: str
    mode: AddressingMode
    operand_text: str
    cycles: str
    label: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    @property
    def text(self) -> str:
        """Assembly text: mnemonic and operand."""
        if self.operand_text:
            return f"{self.mnemonic} {self.operand_text}"
        return self.mnemonic


@dataclass
class ByteRun:
    """
    Consecutive bytes that were not decoded as instructions.

    Attributes:
        address: Address of the first byte
        raw_bytes: The bytes
    """
    address: int
    raw_bytes: bytearray = field(default_factory=bytearray)


Entry = Union[DecodedInstruction, ByteRun]


def chunk_bytes(data: Sequence[int], size: int) -> list[Sequence[int]]:
    """Split data into consecutive chunks of at most ``size`` items."""
    return [data[i:i + size] for i in range(0, len(data), size)]


# =============================================================================
# Operand Formatting
# =============================================================================

def _hex8(value: int) -> str:
    return f"${value:02X}"


def _hex16(value: int) -> str:
    return f"${value:04X}"


def _word(operand: bytes) -> int:
    return operand[0] | (operand[1] << 8)


# Branch operands are resolved separately since they depend on the address.
_OPERAND_FORMATTERS: dict[AddressingMode, Callable[[bytes], str]] = {
    AddressingMode.IMMEDIATE: lambda op: f"#{_hex8(op[0])}",
    AddressingMode.ZERO_PAGE: lambda op: _hex8(op[0]),
    AddressingMode.ZERO_PAGE_X: lambda op: f"{_hex8(op[0])},X",
    AddressingMode.ZERO_PAGE_Y: lambda op: f"{_hex8(op[0])},Y",
    AddressingMode.ABSOLUTE: lambda op: _hex16(_word(op)),
    AddressingMode.ABSOLUTE_X: lambda op: f"{_hex16(_word(op))},X",
    AddressingMode.ABSOLUTE_Y: lambda op: f"{_hex16(_word(op))},Y",
    AddressingMode.INDIRECT: lambda op: f"({_hex16(_word(op))})",
    AddressingMode.INDIRECT_X: lambda op: f"({_hex8(op[0])},X)",
    AddressingMode.INDIRECT_Y: lambda op: f"({_hex8(op[0])}),Y",
    AddressingMode.SINGLE: lambda op: "",
}


def branch_target(address: int, displacement: int) -> int:
    """
    Target of a relative branch at ``address``.

    The displacement is a signed byte counted from the instruction
    following the branch.
    """
    if displacement >= 0x80:
        displacement -= 0x100
    return (address + 2 + displacement) & 0xFFFF


def crosses_page(address: int, target: int) -> bool:
    """True if a branch at ``address`` lands on another 256-byte page."""
    return ((address + 2) & 0xFF00) != (target & 0xFF00)


# =============================================================================
# 6502 Disassembler
# =============================================================================

class Disassembler:
    """
    Disassembler for C64 program files.

    Attributes:
        load_address: Address of the first byte after the header
        options: Active DisassemblerOptions
    """

    INSTRUCTION_PAD = " " * 5
    RANGED_INSTRUCTION_PAD = " " * 20
    COMMENT_COLUMN = 50

    def __init__(
        self,
        buffer: bytes,
        labels: Optional[Union[Iterable, Mapping[str, int]]] = None,
        options: Optional[DisassemblerOptions] = None,
    ):
        """
        Initialize the disassembler.

        Args:
            buffer: Program file contents, load address first
            labels: Objects with ``name`` and ``address`` attributes (such
                    as assembler Labels), or a name -> address mapping.
                    When two labels share an address the later one wins.
            options: Output options (defaults if None)
        """
        self.buffer = bytes(buffer)
        self.options = options or DisassemblerOptions()
        self.load_address = (
            self.buffer[0] | (self.buffer[1] << 8) if len(self.buffer) >= 2 else 0
        )

        self._labels: dict[int, str] = {}
        if labels is not None:
            items = labels.items() if isinstance(labels, Mapping) else (
                (label.name, label.address) for label in labels
            )
            for name, address in items:
                self._labels[address & 0xFFFF] = name

        if self.options.is_instruction is not None:
            self._pad = self.RANGED_INSTRUCTION_PAD
            self._bytes_per_line = 8
        else:
            self._pad = self.INSTRUCTION_PAD
            self._bytes_per_line = 1

    # =========================================================================
    # Decoding
    # =========================================================================

    def decode(self) -> list[Entry]:
        """
        Decode the whole buffer.

        Returns:
            DecodedInstruction and ByteRun entries in address order
        """
        entries: list[Entry] = []
        pending: Optional[ByteRun] = None
        is_instruction = self.options.is_instruction or (lambda address: True)

        offset = 2
        while offset < len(self.buffer):
            address = (self.load_address + offset - 2) & 0xFFFF
            opcode = self.buffer[offset]
            entry = reverse_lookup(opcode)

            if entry is None or not is_instruction(address):
                if pending is None:
                    pending = ByteRun(address)
                pending.raw_bytes.append(opcode)
                offset += 1
                continue

            size = 1 + entry.mode.operand_size
            if offset + size > len(self.buffer):
                # Truncated instruction: the rest of the buffer is data.
                if pending is None:
                    pending = ByteRun(address)
                pending.raw_bytes.extend(self.buffer[offset:])
                break

            if pending is not None:
                entries.append(pending)
                pending = None

            raw = self.buffer[offset:offset + size]
            entries.append(self._decode_instruction(address, raw, entry))
            offset += size

        if pending is not None:
            entries.append(pending)
        return entries

    def _decode_instruction(self, address: int, raw: bytes, entry) -> DecodedInstruction:
        operand = raw[1:]
        if entry.mode == AddressingMode.BRANCH:
            target = branch_target(address, operand[0])
            operand_text = _hex16(target)
            cycles = format_cycles(entry.cycle_bits, crosses_page(address, target))
        else:
            operand_text = _OPERAND_FORMATTERS[entry.mode](operand)
            cycles = format_cycles(entry.cycle_bits)

        return DecodedInstruction(
            address=address,
            raw_bytes=raw,
            mnemonic=entry.mnemonic,
            mode=entry.mode,
            operand_text=operand_text,
            cycles=cycles,
            label=self._labels.get(address),
        )

    # =========================================================================
    # Formatting
    # =========================================================================

    def format_instruction(self, insn: DecodedInstruction) -> str:
        """Format one instruction line, with cycle and label comments if enabled."""
        columns = [f"{b:02X}" for b in insn.raw_bytes]
        columns += ["  "] * (3 - len(columns))
        line = f"{insn.address:04X}: {' '.join(columns)}{self._pad}{insn.text}"

        comments = []
        if self.options.show_cycles:
            comments.append(insn.cycles)
        if self.options.show_labels:
            comments.append(insn.label or "")
        if not comments:
            return line
        return f"{line:<{self.COMMENT_COLUMN}}; {' '.join(comments)}"

    def format_run(self, run: ByteRun) -> list[str]:
        """Format undecoded bytes as hex dump lines."""
        lines = []
        address = run.address
        for chunk in chunk_bytes(run.raw_bytes, self._bytes_per_line):
            lines.append(f"{address:04X}: {' '.join(f'{b:02X}' for b in chunk)}")
            address = (address + self._bytes_per_line) & 0xFFFF
        return lines

    def disassemble(self) -> list[str]:
        """
        Disassemble the buffer into text lines.

        Returns:
            One string per instruction or hex dump line; empty for a buffer
            shorter than the load address header
        """
        lines = []
        for entry in self.decode():
            if isinstance(entry, ByteRun):
                lines.extend(self.format_run(entry))
            else:
                lines.append(self.format_instruction(entry))
        return lines

    def disassemble_to_text(self) -> str:
        """Disassemble and return the listing as a single string."""
        return "\n".join(self.disassemble())


def disassemble(
    buffer: bytes,
    labels: Optional[Union[Iterable, Mapping[str, int]]] = None,
    options: Optional[DisassemblerOptions] = None,
) -> list[str]:
    """
    Convenience function to disassemble a program file.

    Args:
        buffer: Program file contents, load address first
        labels: Labels to annotate (see Disassembler)
        options: Output options

    Returns:
        Disassembly lines
    """
    return Disassembler(buffer, labels, options).disassemble()
