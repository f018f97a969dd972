"""
6502 Assembler for the Commodore 64
===================================

This package converts 6502 assembly source into Commodore 64 program files
(.prg) that load at $0801 and start themselves with ``RUN``.

Main Components
---------------
- **Assembler**: Main assembler class that runs the two passes
- **parser**: Per-line grammar (comments, labels, mnemonic, operand)
- **LabelTable**: Single-definition label registry
- **CodeGenerator**: Encodes lines into bytes, one PassContext per pass

Assembly Process
----------------
1. **Normalization**: comments and surrounding whitespace are removed and
   blank lines dropped (line numbers are kept for error messages).
2. **Pass 0**: every line is sized and emitted, labels are recorded.
3. **Pass 1**: every line is emitted again with labels resolved; this
   pass's bytes are the result.

Example Usage
-------------
>>> from c64_sdk.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
... loop:
...     INC $D020
...     JMP loop
... ''')
>>> asm.write_prg("border.prg")
"""

from c64_sdk.assembler.assembler import Assembler, assemble, assemble_file
from c64_sdk.assembler.codegen import (
    CodeGenerator,
    PassContext,
    LABEL_PASS,
    EMIT_PASS,
    build_autorun_stub,
)
from c64_sdk.assembler.labels import Label, LabelTable
from c64_sdk.assembler.parser import SourceLine, preprocess

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Code generator
    "CodeGenerator",
    "PassContext",
    "LABEL_PASS",
    "EMIT_PASS",
    "build_autorun_stub",
    # Labels
    "Label",
    "LabelTable",
    # Parser
    "SourceLine",
    "preprocess",
]
