"""
c64asm - 6502 Assembler Command-Line Interface
==============================================

This module implements the command-line interface for the 6502 assembler.
It assembles a source file into an auto-running Commodore 64 program.

Usage Examples
--------------
Basic assembly:
    $ c64asm hello.asm

With output file:
    $ c64asm hello.asm -o hello.prg

Also write the raw memory image and show the result:
    $ c64asm hello.asm -b hello.bin -d

Verbose mode:
    $ c64asm -v hello.asm

Environment
-----------
C64_SDK_MAX_ERRORS and C64_SDK_VERBOSE are read as defaults (see
c64_sdk.config.AssemblerConfig.from_env).
"""

import sys
from pathlib import Path
from typing import Optional

import click

from c64_sdk import __version__
from c64_sdk.assembler import Assembler
from c64_sdk.config import AssemblerConfig
from c64_sdk.disassembler import DisassemblerOptions, disassemble
from c64_sdk.cli.errors import ExitCode, handle_cli_exception, setup_logging


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
    help="Output .prg file (default: input.prg)",
)
@click.option(
    "-b", "--binary",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the raw memory image (no load address)",
)
@click.option(
    "-d", "--disassemble", "show_disassembly",
    is_flag=True,
    help="Print the disassembly of the assembled program",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c64asm")
def main(
    input_file: Path,
    output: Optional[Path],
    binary: Optional[Path],
    show_disassembly: bool,
    verbose: bool,
) -> None:
    """
    Assemble 6502 source code into a Commodore 64 program.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The program loads at $0801 and starts itself: it begins with a one-line
    BASIC program (SYS 2061) that jumps to the assembled code.

    Errors are reported for every defective line. The output file is still
    written, and the exit status is 1.

    \b
    Examples:
        c64asm hello.asm              # Outputs hello.prg
        c64asm hello.asm -o out.prg   # Specify output file
        c64asm hello.asm -d           # Show the disassembly
    """
    config = AssemblerConfig.from_env()
    config.verbose = config.verbose or verbose
    setup_logging(config.verbose)

    output_file = output if output is not None else input_file.with_suffix(".prg")
    asm = Assembler(config)

    try:
        if config.verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if asm.has_errors():
            click.echo(asm.get_error_report(), err=True)

        asm.write_prg(output_file)
        if config.verbose:
            click.echo(f"Wrote {len(asm.get_prg())} bytes to {output_file}")

        if binary:
            asm.write_binary(binary)
            if config.verbose:
                click.echo(f"Wrote {len(asm.get_code())} bytes raw binary to {binary}")

        if show_disassembly:
            options = DisassemblerOptions(show_labels=True)
            for line in disassemble(asm.get_prg(), asm.get_labels(), options):
                click.echo(line)

        if config.verbose:
            click.echo(f"Assembly complete: {len(asm.get_code())} bytes at "
                       f"${config.load_address:04X}")
            click.echo(f"Defined {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=config.verbose, error_type="Assembly")

    if asm.has_errors():
        sys.exit(ExitCode.BUILD_ERROR)


if __name__ == "__main__":
    main()
