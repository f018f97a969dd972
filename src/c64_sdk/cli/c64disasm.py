"""
c64disasm - 6502 Disassembler Command-Line Interface
====================================================

This module implements the command-line interface for the 6502
disassembler. It lists the instructions of a Commodore 64 program file.

Usage Examples
--------------
Disassemble a program:
    $ c64disasm hello.prg

With cycle counts:
    $ c64disasm hello.prg --cycles

Annotate with the labels of the source it was built from:
    $ c64disasm hello.prg -s hello.asm

Annotate by hand and mark where the code is:
    $ c64disasm game.prg -L irq=$C000 -c '$080D-$0FFF' -c '$C000-$C0FF'

Output to file:
    $ c64disasm hello.prg -o hello.lst
"""

from pathlib import Path
from typing import Optional

import click

from c64_sdk import __version__
from c64_sdk.assembler import Assembler
from c64_sdk.disassembler import (
    DisassemblerOptions,
    code_ranges_predicate,
    disassemble,
)
from c64_sdk.cli.errors import handle_cli_exception, setup_logging


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_address(text: str) -> int:
    """
    Parse an address given as $hex, 0xhex or decimal.

    Raises:
        ValueError: If the text is not a number in 0-65535
    """
    text = text.strip()
    if text.startswith("$"):
        value = int(text[1:], 16)
    elif text.lower().startswith("0x"):
        value = int(text[2:], 16)
    else:
        value = int(text)
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"address out of range: {text}")
    return value


def _parse_label_defs(ctx, param, values: tuple[str, ...]) -> dict[str, int]:
    labels = {}
    for defn in values:
        name, sep, value = defn.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=ADDR, got '{defn}'")
        try:
            labels[name.strip()] = parse_address(value)
        except ValueError:
            raise click.BadParameter(f"invalid address in '{defn}'")
    return labels


def _parse_ranges(ctx, param, values: tuple[str, ...]) -> list[tuple[int, int]]:
    ranges = []
    for text in values:
        start, sep, end = text.partition("-")
        if not sep:
            raise click.BadParameter(f"expected START-END, got '{text}'")
        try:
            ranges.append((parse_address(start), parse_address(end)))
        except ValueError:
            raise click.BadParameter(f"invalid address in '{text}'")
    return ranges


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--cycles",
    is_flag=True,
    help="Show the cycle cost of every instruction",
)
@click.option(
    "--labels", "show_labels",
    is_flag=True,
    help="Show a label column (implied by -s and -L)",
)
@click.option(
    "-s", "--source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Assembly source to take labels from",
)
@click.option(
    "-L", "--label", "label_defs",
    multiple=True,
    callback=_parse_label_defs,
    help="Add a label (format: NAME=ADDR, can be repeated)",
)
@click.option(
    "-c", "--code", "code_ranges",
    multiple=True,
    callback=_parse_ranges,
    help="Only decode addresses in START-END (inclusive, can be repeated); "
         "everything else is dumped as data",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c64disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    cycles: bool,
    show_labels: bool,
    source: Optional[Path],
    label_defs: dict[str, int],
    code_ranges: list[tuple[int, int]],
    verbose: bool,
) -> None:
    """
    Disassemble a Commodore 64 program file.

    INPUT_FILE is the .prg file to disassemble. Its first two bytes are the
    load address.

    \b
    Examples:
        c64disasm hello.prg --cycles
        c64disasm hello.prg -s hello.asm
        c64disasm game.prg -c '$080D-$0FFF' -o game.lst
    """
    setup_logging(verbose)

    try:
        data = input_file.read_bytes()

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)

        labels: dict[str, int] = {}
        if source:
            asm = Assembler(verbose=verbose)
            asm.assemble_file(source)
            if asm.has_errors():
                click.echo(f"Warning: {source} has errors, labels may be incomplete",
                           err=True)
                click.echo(asm.get_error_report(), err=True)
            labels.update(asm.get_symbols())
        labels.update(label_defs)

        options = DisassemblerOptions(
            show_labels=show_labels or bool(labels),
            show_cycles=cycles,
            is_instruction=code_ranges_predicate(code_ranges) if code_ranges else None,
        )
        lines = disassemble(data, labels, options)

        result = "\n".join(lines) + "\n" if lines else ""
        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Lines: {len(lines)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
