"""
6502 Assembly Line Grammar
==========================

The assembler works one source line at a time. Each line is read with a
small fixed grammar:

    line     := [label ':'] [mnemonic [ws operand]] [';' comment]
    label    := word
    mnemonic := word
    operand  := '#' literal          immediate
              | literal               absolute address
              | symbol                absolute label reference
              | 'A'                   accumulator (single-byte form)
    literal  := digits | '$' hexdigits
    symbol   := [A-Za-z_][A-Za-z0-9_]*

Anything else in the operand position (indexing, parentheses, expressions)
still parses as a line, but no encoder accepts it.

Example
-------
    loop:   LDA #$05    ; load five
    ^^^^    ^^^ ^^^^
    label   |   operand
            mnemonic
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from c64_sdk.errors import AssemblySyntaxError, SourceLocation


# A ';' starts a comment unless it is escaped with a backslash.
_COMMENT_RE = re.compile(r"(?<!\\);")

_LABEL_RE = re.compile(r"^(\w+):\s*(.*)$", re.ASCII)
_INSTRUCTION_RE = re.compile(r"^(\w+)(?:\s+(.*))?$", re.ASCII)
_IMMEDIATE_RE = re.compile(r"^#\s*(.*)$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^\$([0-9A-Fa-f]+)$")
_SYMBOL_RE = re.compile(r"^[A-Za-z_][0-9A-Za-z_]*$")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class SourceLine:
    """
    A non-empty source line after comment and whitespace removal.

    Attributes:
        line_no: 1-based line number in the original source
        text: Normalized line text
    """
    line_no: int
    text: str


# =============================================================================
# Normalization
# =============================================================================

def strip_comment(text: str) -> str:
    """Remove a trailing comment and surrounding whitespace."""
    match = _COMMENT_RE.search(text)
    if match:
        text = text[:match.start()]
    return text.strip()


def preprocess(lines: Iterable[str]) -> list[SourceLine]:
    """
    Normalize raw source lines.

    Blank and comment-only lines are dropped, but line numbers still count
    them so that errors point at the right place in the file.
    """
    result = []
    for index, raw in enumerate(lines):
        text = strip_comment(raw.rstrip("\r\n"))
        if text:
            result.append(SourceLine(index + 1, text))
    return result


# =============================================================================
# Line Structure
# =============================================================================

def split_label(text: str) -> tuple[Optional[str], str]:
    """
    Split off a leading ``label:`` definition.

    Returns:
        (label, rest) where label is None if the line defines no label
    """
    match = _LABEL_RE.match(text)
    if match is None:
        return None, text
    return match.group(1), match.group(2)


def parse_instruction(
    text: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> tuple[Optional[str], Optional[str]]:
    """
    Split instruction text into mnemonic and operand.

    Args:
        text: Instruction text with label and comment already removed
        location: Source location for error messages
        source_line: Full line shown in error messages

    Returns:
        (mnemonic, operand); mnemonic is None for empty text and
        operand is None when there is no operand

    Raises:
        AssemblySyntaxError: If the text is not "mnemonic [operand]"
    """
    if not text:
        return None, None

    match = _INSTRUCTION_RE.match(text)
    if match is None:
        raise AssemblySyntaxError(
            f"syntax error: {text}",
            location=location,
            hint="expected 'MNEMONIC' or 'MNEMONIC operand'",
            source_line=source_line,
        )

    operand = match.group(2)
    return match.group(1).upper(), operand if operand else None


# =============================================================================
# Operand Recognizers
# =============================================================================

def parse_number(text: str) -> Optional[int]:
    """
    Parse a numeric literal.

    Accepts decimal digits (``49152``) or ``$`` followed by hex digits
    (``$C000``).

    Returns:
        The value, or None if the text is not a literal
    """
    if _DECIMAL_RE.match(text):
        return int(text, 10)
    match = _HEX_RE.match(text)
    if match:
        return int(match.group(1), 16)
    return None


def parse_immediate(text: str) -> Optional[int]:
    """
    Parse an immediate operand such as ``#$05`` or ``#10``.

    Returns:
        The literal value (not range-checked), or None if the operand is
        not a ``#`` literal
    """
    match = _IMMEDIATE_RE.match(text)
    if match is None:
        return None
    return parse_number(match.group(1))


def parse_symbol(text: str) -> Optional[str]:
    """Return the text if it is a valid label reference, else None."""
    if _SYMBOL_RE.match(text):
        return text
    return None


def is_accumulator(text: Optional[str]) -> bool:
    """True for the explicit accumulator operand of ``ASL A`` and friends."""
    return text is not None and text.upper() == "A"
