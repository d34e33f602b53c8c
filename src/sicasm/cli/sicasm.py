"""
sicasm - SIC Assembler Command-Line Interface
=============================================

This module implements the command-line interface for the two-pass SIC
assembler.

Usage Examples
--------------
Basic assembly (writes copy.obj into the current directory):
    $ sicasm path/to/copy.asm

With output file:
    $ sicasm copy.asm -o build/copy.obj

Generate listing and symbol files:
    $ sicasm copy.asm -l copy.lst -s copy.sym

Verbose mode (token lines and debug logging):
    $ sicasm -v copy.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from sicasm import __version__
from sicasm.assembler import Assembler
from sicasm.cli.errors import handle_cli_exception
from sicasm.config import AssemblerConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


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
    help="Output object file (default: input name with .obj, in the current directory)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="sicasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble SIC source code into an object program.

    INPUT_FILE is the assembly source file. The object program (Header,
    Text and End records) is written to the input's base name with the
    .obj suffix, in the current directory.

    \b
    Examples:
        sicasm copy.asm              # Outputs copy.obj
        sicasm copy.asm -o out.obj   # Specify output file
        sicasm -l copy.lst copy.asm  # Also write a listing
    """
    setup_logging(verbose)
    config = AssemblerConfig.from_env()
    logger.debug(f"Using {config}")
    asm = Assembler(config)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if verbose:
            click.echo("Token lines:")
            for tokens in asm.get_token_lines():
                click.echo(f"  {tokens}")

        click.echo("Symbol table:")
        for name, address in asm.get_symbols().items():
            click.echo(f"  {name:<8s} {address:06X}")

        output_file = asm.write_obj(output)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        length = asm.get_program_length()
        click.echo(f"Program length: {length:06X} ({length} bytes)")
        click.echo(f"Wrote {output_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
