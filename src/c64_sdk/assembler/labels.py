"""
Label Table
===========

Maps label names to the address they were defined at. A fresh table is
created for every assembly run; it is filled during the label-collecting
pass and only read during the emission pass.

Labels are case-sensitive: ``loop`` and ``LOOP`` are different labels.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from c64_sdk.errors import DuplicateSymbolError, SourceLocation


@dataclass(frozen=True)
class Label:
    """
    Label table entry.

    Attributes:
        name: Label name as written in the source
        address: Address the label resolves to (0-65535)
        line: Source line number of the definition
    """
    name: str
    address: int
    line: int


class LabelTable:
    """
    Single-definition label registry.

    Entries are never removed or changed once added.
    """

    def __init__(self):
        self._labels: dict[str, Label] = {}

    def add(self, name: str, address: int, line: int,
            location: Optional[SourceLocation] = None,
            source_line: Optional[str] = None) -> Label:
        """
        Define a label.

        Args:
            name: Label name
            address: Current program counter
            line: Line number of the definition
            location: Full location used in the error message, if any
            source_line: Source text shown in the error message, if any

        Returns:
            The new Label

        Raises:
            DuplicateSymbolError: If the name is already defined; the
                                  existing entry is left unchanged
        """
        existing = self._labels.get(name)
        if existing is not None:
            raise DuplicateSymbolError(name, existing.line, location=location,
                                       source_line=source_line)

        label = Label(name, address, line)
        self._labels[name] = label
        return label

    def find(self, name: str) -> Optional[Label]:
        """Look up a label by name."""
        return self._labels.get(name)

    def similar(self, name: str, limit: int = 3) -> list[str]:
        """Names that differ from ``name`` only by case, for error hints."""
        folded = name.lower()
        return [n for n in self._labels if n.lower() == folded and n != name][:limit]

    def as_dict(self) -> dict[str, int]:
        """Return a name -> address mapping."""
        return {name: label.address for name, label in self._labels.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(list(self._labels.values()))
