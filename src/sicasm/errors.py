"""
SIC Assembler Error Hierarchy
=============================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from SicError, allowing callers to catch every
assembler-related error with a single except clause.

Exception Hierarchy
-------------------
SicError (base)
├── AssemblerError (source-level errors)
│   ├── AssemblySyntaxError - malformed line or operand
│   ├── UndefinedSymbolError - operand references an unknown label
│   ├── DuplicateSymbolError - label defined more than once
│   ├── DirectiveError - unknown instruction/directive
│   ├── ProgramLengthError - negative program length after pass 1
│   └── AddressRangeError - program runs past the 24-bit address space
├── SourceFileError - source file cannot be read
└── ObjectFileError - object file cannot be written or parsed
    └── ObjectFormatError - malformed object record

There is no error recovery: the first error raised stops the run.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass, field
from typing import Optional

# Indentation of quoted source lines in error reports
SOURCE_INDENT = " " * 4


# =============================================================================
# Base Exception Class
# =============================================================================

class SicError(Exception):
    """
    Base exception for all errors raised by the package.

        try:
            assembler.assemble_file("copy.asm")
        except SicError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        width: Characters covered by the offending token (not compared)
    """
    filename: str
    line: int
    column: int = 1
    width: int = field(default=1, compare=False)

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def underline(self) -> str:
        """Marker line placing '^~~~' under the token within its source line."""
        return " " * (self.column - 1) + "^" + "~" * (self.width - 1)


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(SicError):
    """
    Base exception for errors found in the assembly source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Build the report: a headline, then the source line with the
        offending token underlined, then the hint.

            copy.asm:2:11: error: undefined symbol 'ALPA'
                FIRST LDA ALPA
                          ^~~~
            hint: did you mean 'ALPHA'?
        """
        where = f"{self.location}: " if self.location else ""
        lines = [f"{where}error: {self.message}"]

        if self.location is not None and self.source_line is not None:
            lines.append(SOURCE_INDENT + self.source_line)
            if self.location.column > 0:
                lines.append(SOURCE_INDENT + self.location.underline())

        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)


class AssemblySyntaxError(AssemblerError):
    """
    A source line or operand that cannot be interpreted.

    Examples:
        - Empty line where a statement was expected
        - START without a hexadecimal address
        - BYTE constant not written as X'..' or C'..'
        - Non-decimal RESB/RESW/WORD operand
        - Missing END line
    """
    pass


class UndefinedSymbolError(AssemblerError):
    """
    Operand or END label missing from the symbol table.

    Raised during pass 2. Up to three close spellings become the hint.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = list(similar_symbols or [])[:3]
        if hint is None and self.similar_symbols:
            hint = "did you mean " + " or ".join(repr(s) for s in self.similar_symbols) + "?"
        super().__init__(f"undefined symbol '{symbol}'", location, hint, source_line)


class DuplicateSymbolError(AssemblerError):
    """
    Label defined more than once.

    Includes the location of the original definition when available.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DirectiveError(AssemblerError):
    """
    Opcode that is neither a machine instruction nor a known directive.

    Raised independently by both passes.
    """

    def __init__(
        self,
        opcode: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        pass_name: Optional[str] = None,
    ):
        self.opcode = opcode
        self.pass_name = pass_name
        prefix = f"[{pass_name}] " if pass_name else ""
        super().__init__(
            f"{prefix}invalid instruction/directive '{opcode}'",
            location=location,
            source_line=source_line,
        )


class ProgramLengthError(AssemblerError):
    """
    Pass 1 computed a negative program length.

    Indicates a corrupt START/END pairing; raised before pass 2 runs.
    """

    def __init__(self, length: int, location: Optional[SourceLocation] = None):
        self.length = length
        super().__init__(
            f"program length is negative ({length})",
            location=location,
            hint="check the START address",
        )


class AddressRangeError(AssemblerError):
    """
    Program that extends past $FFFFFF.

    Raised by pass 1 when the final location counter no longer fits the
    six hex digits of an object record address.
    """
    pass


# =============================================================================
# File Exceptions
# =============================================================================

class SourceFileError(SicError):
    """Source file cannot be opened or decoded."""
    pass


class ObjectFileError(SicError):
    """Object file cannot be created or written."""
    pass


class ObjectFormatError(ObjectFileError):
    """
    Malformed object program.

    Raised when reading an object file whose records do not follow the
    Header/Text/End layout:
    - Missing or repeated Header record
    - Text byte count disagreeing with its payload
    - Non-hex characters in an address or payload
    - Missing End record
    """
    pass
