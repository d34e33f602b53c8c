"""
SIC Assembler - Main Interface
==============================

This module provides the Assembler class, the primary interface for
assembling SIC source code. It runs the tokenizer, pass 1 and pass 2 and
keeps the results for inspection and output.

Example Usage
-------------
>>> from sicasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> text = asm.assemble_string('''COPY START 1000
... FIRST LDA ALPHA
... ALPHA WORD 5
... END FIRST''')
>>> print(text)
HCOPY  001000000006
T00100006001003000005
E001000
>>> asm.get_symbols()
{'FIRST': 4096, 'ALPHA': 4099}

Command-Line Usage
------------------
    $ sicasm copy.asm               # writes copy.obj
    $ sicasm copy.asm -o out.obj -l copy.lst -s copy.sym
"""

from pathlib import Path
from typing import Optional
import logging

from sicasm.assembler.lexer import TokenLine, read_source, tokenize
from sicasm.assembler.parser import Program, parse_program
from sicasm.assembler.pass1 import Pass1Result, build_symbol_table
from sicasm.assembler.pass2 import Pass2Result, generate_object_program
from sicasm.config import AssemblerConfig
from sicasm.errors import AssemblerError, ObjectFileError
from sicasm.objfile.records import ObjectProgram

logger = logging.getLogger(__name__)


def object_file_name(source_path: str | Path, suffix: str = ".obj") -> str:
    """
    Derive the object file name for a source file.

    The directory is stripped and the suffix replaced:
    "path/to/prog.asm" -> "prog.obj", "prog" -> "prog.obj".
    """
    return Path(source_path).with_suffix(suffix).name


class Assembler:
    """
    Two-pass SIC assembler.

    Each call to assemble_string() or assemble_file() is a fresh run; the
    results of the last successful run are available through the getters.
    The object file is only produced on request, after both passes have
    succeeded.

    Attributes:
        config: Object file layout settings
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._source_file: Optional[Path] = None
        self._token_lines: tuple[TokenLine, ...] = ()
        self._program: Optional[Program] = None
        self._pass1: Optional[Pass1Result] = None
        self._pass2: Optional[Pass2Result] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> str:
        """
        Assemble source code from a string.

        Args:
            source: SIC assembly source
            filename: Virtual filename for error messages

        Returns:
            The object program text

        Raises:
            AssemblerError: On the first error in the source
        """
        self._token_lines = ()
        self._program = None
        self._pass1 = None
        self._pass2 = None

        token_lines = tokenize(source, filename)
        self._token_lines = tuple(token_lines)

        program = parse_program(token_lines, filename)
        self._program = program

        pass1 = build_symbol_table(program)
        self._pass1 = pass1

        self._pass2 = generate_object_program(program, pass1, self.config)
        logger.debug(
            f"Assembled {filename}: {len(pass1.symbols)} symbols, "
            f"{self._pass2.object_program.code_bytes()} object bytes"
        )
        return self.get_object_text()

    def assemble_file(self, filepath: str | Path) -> str:
        """
        Assemble a source file.

        Raises:
            SourceFileError: If the file cannot be read
            AssemblerError: On the first error in the source
        """
        filepath = Path(filepath)
        self._source_file = filepath
        source = read_source(filepath, self.config.source_encoding)
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def _require(self) -> Pass2Result:
        if self._pass2 is None:
            raise AssemblerError("no successful assembly to report")
        return self._pass2

    def get_token_lines(self) -> list[list[str]]:
        """Return the token lines of the last run."""
        return [list(line.tokens) for line in self._token_lines]

    def get_symbols(self) -> dict[str, int]:
        """Return the symbol table (label -> address) of the last run."""
        if self._pass1 is None:
            return {}
        return dict(self._pass1.symbols)

    def get_program_name(self) -> str:
        return self._program.name if self._program else ""

    def get_start_address(self) -> int:
        return self._program.start if self._program else 0

    def get_program_length(self) -> int:
        """Return the program length computed by pass 2."""
        return self._require().program_length

    def get_object_program(self) -> ObjectProgram:
        return self._require().object_program

    def get_object_text(self) -> str:
        """Return the object program rendered as text."""
        return self.get_object_program().render(self.config.end_record_newline)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Addresses, generated object code and source lines, followed by
            the symbol table.
        """
        pass2 = self._require()
        lines = []
        lines.append("SIC Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr    Code          Line  Source")
        lines.append("-" * 60)
        lines.extend(entry.format() for entry in pass2.listing)
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, address in sorted(self.get_symbols().items()):
            lines.append(f"{name:20s} = {address:06X}")
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Output Methods
    # =========================================================================

    def default_object_path(self) -> Path:
        """Object file name derived from the last source file."""
        source = self._source_file or Path(self.get_program_name() or "a")
        return Path(object_file_name(source, self.config.object_suffix))

    def write_obj(self, filepath: str | Path | None = None) -> Path:
        """
        Write the object program.

        Args:
            filepath: Output path (default: source name with the object suffix,
                      in the current directory)

        Returns:
            The path written

        Raises:
            ObjectFileError: If the file cannot be created or written
        """
        text = self.get_object_text()
        filepath = Path(filepath) if filepath is not None else self.default_object_path()
        self._write_text(filepath, text)
        logger.debug(f"Wrote object program to {filepath}")
        return filepath

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing."""
        self._write_text(Path(filepath), self.get_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, in definition order)
        """
        lines = ["# Symbol table", "# Generated by sicasm"]
        for name, address in self.get_symbols().items():
            lines.append(f"{name} {address:06X}")
        self._write_text(Path(filepath), "\n".join(lines) + "\n")

    @staticmethod
    def _write_text(filepath: Path, text: str) -> None:
        try:
            with open(filepath, "w", newline="\n") as f:
                f.write(text)
        except OSError as e:
            raise ObjectFileError(f"cannot write '{filepath}': {e}") from e


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             config: Optional[AssemblerConfig] = None) -> str:
    """
    Assemble source code and return the object program text.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(config).assemble_string(source, filename)


def assemble_file(filepath: str | Path,
                  config: Optional[AssemblerConfig] = None) -> str:
    """
    Assemble a file and return the object program text.

    Raises:
        SourceFileError: If the file cannot be read
        AssemblerError: If assembly fails
    """
    return Assembler(config).assemble_file(filepath)
