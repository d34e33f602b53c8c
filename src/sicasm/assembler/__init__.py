"""
SIC Two-Pass Assembler
======================

This package assembles SIC (Simplified Instructional Computer) source code
into an object program of Header, Text and End records.

Main Components
---------------
- **Assembler**: Orchestrates the assembly process
- **lexer**: Splits source lines into token lines, dropping comments
- **parser**: Assigns label/opcode/operand fields and finds START and END
- **pass1**: Location counter walk and symbol table construction
- **pass2**: Instruction/directive encoding and Text record packing
- **opcodes**: SIC instruction set and directive names

Assembly Process
----------------
1. **Tokenize**: every non-comment line becomes a token line
2. **Parse**: token lines become statements; the START line sets the
   program name and load address
3. **Pass 1**: assign label addresses, measure the program
4. **Pass 2**: encode statements, resolve labels, pack Text records

Supported Features
------------------
- 26 SIC machine instructions with optional indexed addressing (",X")
- Directives START, END, WORD, BYTE (X'..' and C'..'), RESB, RESW
- Listing and symbol file output
"""

from sicasm.assembler.assembler import Assembler, assemble, assemble_file, object_file_name
from sicasm.assembler.lexer import TokenLine, tokenize, read_source
from sicasm.assembler.parser import Program, Statement, has_label, split_label, parse_program, parse_source
from sicasm.assembler.pass1 import Pass1Result, Symbol, SymbolTable, build_symbol_table
from sicasm.assembler.pass2 import (
    ListingLine,
    PackerState,
    Pass2Result,
    TextRecordBuilder,
    generate_object_program,
)
from sicasm.assembler.opcodes import (
    OPCODE_TABLE,
    MNEMONICS,
    DIRECTIVES,
    NOT_AN_INSTRUCTION,
    get_opcode,
    is_instruction,
    is_directive,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    "object_file_name",
    # Tokenizer
    "TokenLine",
    "tokenize",
    "read_source",
    # Parser
    "Program",
    "Statement",
    "has_label",
    "split_label",
    "parse_program",
    "parse_source",
    # Pass 1
    "Pass1Result",
    "Symbol",
    "SymbolTable",
    "build_symbol_table",
    # Pass 2
    "ListingLine",
    "PackerState",
    "Pass2Result",
    "TextRecordBuilder",
    "generate_object_program",
    # Opcodes
    "OPCODE_TABLE",
    "MNEMONICS",
    "DIRECTIVES",
    "NOT_AN_INSTRUCTION",
    "get_opcode",
    "is_instruction",
    "is_directive",
]
