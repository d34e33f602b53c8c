"""
sicasm - Two-Pass Assembler for the SIC Machine
===============================================

This package assembles programs written for the SIC (Simplified
Instructional Computer) into object programs made of Header, Text and End
records, ready for a loader or linker.

Main Components
---------------
- **assembler**: Tokenizer, pass 1, pass 2 and the Assembler facade
- **objfile**: Object program records and their text format
- **cli**: The sicasm command-line tool

Quick Start
-----------
Assemble a program:
    >>> from sicasm import Assembler
    >>> asm = Assembler()
    >>> asm.assemble_file("copy.asm")
    >>> asm.write_obj()          # writes copy.obj

Or use the command-line tool:
    $ sicasm copy.asm
"""

__version__ = "1.0.0"

from sicasm.assembler import Assembler, assemble, assemble_file
from sicasm.config import AssemblerConfig
from sicasm.errors import (
    SicError,
    AssemblerError,
    AssemblySyntaxError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    DirectiveError,
    ProgramLengthError,
    AddressRangeError,
    SourceFileError,
    ObjectFileError,
    ObjectFormatError,
)
from sicasm.objfile import HeaderRecord, TextRecord, EndRecord, ObjectProgram

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblerConfig",
    # Object program
    "HeaderRecord",
    "TextRecord",
    "EndRecord",
    "ObjectProgram",
    # Exception hierarchy
    "SicError",
    "AssemblerError",
    "AssemblySyntaxError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "DirectiveError",
    "ProgramLengthError",
    "AddressRangeError",
    "SourceFileError",
    "ObjectFileError",
    "ObjectFormatError",
]
