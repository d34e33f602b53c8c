"""
SIC Assembler - Pass 1: Symbol Collection
=========================================

Pass 1 walks the program with a location counter, assigns every label the
address of the statement it is attached to, and measures the program.

Statement footprints:

| Opcode              | Bytes                   |
|---------------------|-------------------------|
| machine instruction | 3                       |
| WORD                | 3                       |
| BYTE X'..'          | hex digits / 2          |
| BYTE C'..'          | characters              |
| RESB n              | n                       |
| RESW n              | 3 * n                   |

The resulting symbol table is frozen into a read-only mapping; pass 2
only reads it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping
import logging

from sicasm.assembler.opcodes import (
    BYTE,
    RESB,
    RESW,
    WORD,
    WORD_SIZE,
    is_instruction,
)
from sicasm.assembler.operands import decode_byte_constant, parse_decimal
from sicasm.assembler.parser import Program, Statement
from sicasm.objfile.records import MAX_ADDRESS
from sicasm.errors import (
    AddressRangeError,
    DirectiveError,
    DuplicateSymbolError,
    ProgramLengthError,
    SourceLocation,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Symbol Table
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name (case-sensitive)
        address: Absolute address of the labelled statement
        location: Where the label was defined
    """
    name: str
    address: int
    location: SourceLocation


class SymbolTable:
    """
    Label to address mapping built during pass 1.

    Labels are unique; defining one twice raises DuplicateSymbolError.
    """

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}

    def define(self, name: str, address: int, location: SourceLocation,
               source_line: str | None = None) -> Symbol:
        """Add a label, failing on duplicates."""
        if name in self._symbols:
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=self._symbols[name].location,
                source_line=source_line,
            )
        symbol = Symbol(name, address, location)
        self._symbols[name] = symbol
        logger.debug(f"Defined {name} = ${address:04X}")
        return symbol

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def get(self, name: str) -> Symbol | None:
        return self._symbols.get(name)

    def addresses(self) -> Mapping[str, int]:
        """Return a read-only snapshot of label addresses."""
        return MappingProxyType({name: sym.address for name, sym in self._symbols.items()})

    def definitions(self) -> Mapping[str, Symbol]:
        """Return a read-only snapshot of the symbol entries."""
        return MappingProxyType(dict(self._symbols))


# =============================================================================
# Pass 1
# =============================================================================

@dataclass(frozen=True)
class Pass1Result:
    """
    Output of pass 1, consumed by pass 2.

    Attributes:
        symbols: Read-only label -> address mapping
        definitions: Label -> Symbol (with definition locations)
        starting: Load address of the program
        program_length: Final location counter minus starting
    """
    symbols: Mapping[str, int]
    definitions: Mapping[str, Symbol]
    starting: int
    program_length: int


def statement_size(stmt: Statement, pass_name: str = "pass1") -> int:
    """
    Return the number of bytes a statement occupies.

    Raises:
        DirectiveError: If the opcode is neither an instruction nor a
            storage directive
        AssemblySyntaxError: If a directive operand is malformed
    """
    opcode = stmt.opcode

    if is_instruction(opcode) or opcode == WORD:
        return WORD_SIZE

    if opcode == BYTE:
        return len(decode_byte_constant(stmt.operand, stmt.operand_location, stmt.text))

    if opcode == RESB:
        return parse_decimal(stmt.operand, RESB, stmt.operand_location, stmt.text)

    if opcode == RESW:
        return WORD_SIZE * parse_decimal(stmt.operand, RESW, stmt.operand_location, stmt.text)

    raise DirectiveError(
        opcode,
        location=stmt.opcode_location,
        source_line=stmt.text,
        pass_name=pass_name,
    )


def build_symbol_table(program: Program) -> Pass1Result:
    """
    Run pass 1 over a parsed program.

    Returns:
        Pass1Result with the frozen symbol table and program length

    Raises:
        DuplicateSymbolError: If a label is defined twice
        DirectiveError: On an unknown instruction/directive
        ProgramLengthError: If the program length is negative
    """
    table = SymbolTable()
    location_counter = program.start
    starting = location_counter

    for stmt in program.statements:
        if stmt.label is not None:
            table.define(stmt.label, location_counter, stmt.location, stmt.text)

        if stmt.is_end:
            break

        location_counter += statement_size(stmt)

    program_length = location_counter - starting
    if program_length < 0:
        raise ProgramLengthError(program_length, program.end.location)
    if location_counter > MAX_ADDRESS:
        raise AddressRangeError(
            f"program ends at ${location_counter:X}, beyond ${MAX_ADDRESS:06X}",
            program.end.location,
            source_line=program.end.text,
        )

    logger.debug(
        f"Pass 1 complete: {len(table)} symbols, length ${program_length:06X}"
    )
    return Pass1Result(
        symbols=table.addresses(),
        definitions=table.definitions(),
        starting=starting,
        program_length=program_length,
    )
