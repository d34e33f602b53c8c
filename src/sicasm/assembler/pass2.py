"""
SIC Assembler - Pass 2: Object Code Generation
==============================================

Pass 2 walks the program again with the frozen symbol table, encodes every
instruction and data directive, and packs the object bytes into Text records.

Instruction Encoding
--------------------
    word = opcode * 65536 + (32768 if indexed) + address(operand)

rendered as 6 hex digits. An instruction without an operand (RSUB) encodes
address 0.

Text Record Packing
-------------------
TextRecordBuilder is a two-state machine:

    NORMAL            --RESB/RESW-->    FORCE_NEW_RECORD
    FORCE_NEW_RECORD  --emit bytes-->   NORMAL (pending record flushed first)

In NORMAL state bytes are appended to the pending record until the next
emission would exceed the record capacity (30 bytes). Reserved storage
carries no object bytes, so the first emission after a reservation always
opens a new record at its own address.

Nothing is written to disk here; the caller renders the finished
ObjectProgram.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, Optional
import difflib
import logging

from sicasm.assembler.opcodes import (
    BYTE,
    RESB,
    RESERVATION_DIRECTIVES,
    RESW,
    WORD,
    WORD_SIZE,
    get_opcode,
    is_instruction,
)
from sicasm.assembler.operands import (
    INDEX_FLAG,
    WORD_MASK,
    decode_byte_constant,
    encode_word,
    parse_decimal,
    parse_instruction_operand,
)
from sicasm.assembler.parser import Program, Statement
from sicasm.assembler.pass1 import Pass1Result
from sicasm.config import AssemblerConfig
from sicasm.errors import (
    AssemblerError,
    DirectiveError,
    UndefinedSymbolError,
)
from sicasm.objfile.records import EndRecord, HeaderRecord, ObjectProgram, TextRecord

logger = logging.getLogger(__name__)

# Highest address that leaves the indexing bit clear
MAX_OPERAND_ADDRESS = INDEX_FLAG - 1


# =============================================================================
# Text Record Packing
# =============================================================================

class PackerState(Enum):
    """State of the Text record packer."""
    NORMAL = auto()             # Append to the pending record while it fits
    FORCE_NEW_RECORD = auto()   # Storage was reserved; next bytes open a new record


class TextRecordBuilder:
    """
    Groups consecutive object bytes into Text records.

    Usage:
        builder = TextRecordBuilder(capacity=30)
        builder.emit(0x1000, b"\\x00\\x10\\x03")
        builder.reserve()
        builder.emit(0x1009, b"\\x00\\x00\\x05")
        records = builder.finish()
    """

    def __init__(self, capacity: int = 30):
        self.capacity = capacity
        self.state = PackerState.NORMAL
        self.records: list[TextRecord] = []
        self._start = 0
        self._code = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes not yet flushed into a record."""
        return bytes(self._code)

    def emit(self, address: int, data: bytes) -> None:
        """
        Add object bytes located at address.

        Data longer than the record capacity is split across records.
        """
        if not data:
            return

        if (self.state is PackerState.FORCE_NEW_RECORD
                or len(self._code) + len(data) > self.capacity):
            self.flush()
        self.state = PackerState.NORMAL

        while data:
            if not self._code:
                self._start = address
            room = self.capacity - len(self._code)
            chunk, data = data[:room], data[room:]
            self._code += chunk
            address += len(chunk)
            if data:
                self.flush()

    def reserve(self) -> None:
        """Note reserved storage; the next emission starts a new record."""
        self.state = PackerState.FORCE_NEW_RECORD

    def flush(self) -> None:
        """Close the pending record. Empty records are never produced."""
        if not self._code:
            return
        record = TextRecord(self._start, bytes(self._code))
        self.records.append(record)
        logger.debug(f"Text record at ${record.start:06X}: {record.length} bytes")
        self._code.clear()

    def finish(self) -> list[TextRecord]:
        """Flush and return all records."""
        self.flush()
        return list(self.records)


# =============================================================================
# Listing
# =============================================================================

@dataclass(frozen=True)
class ListingLine:
    """
    One statement of the assembly listing.

    Attributes:
        address: Location counter at the statement
        code: Object bytes generated by the statement
        line: Source line number
        text: Source text
    """
    address: int
    code: bytes
    line: int
    text: str

    def format(self) -> str:
        code = self.code.hex().upper()
        if len(code) > 12:
            code = code[:10] + ".."
        return f"{self.address:06X}  {code:<12s}  {self.line:4d}  {self.text}"


# =============================================================================
# Pass 2
# =============================================================================

@dataclass(frozen=True)
class Pass2Result:
    """
    Output of pass 2.

    Attributes:
        object_program: Header, Text and End records
        program_length: Final location counter minus starting
        listing: One ListingLine per statement
    """
    object_program: ObjectProgram
    program_length: int
    listing: tuple[ListingLine, ...] = field(default=())


def _resolve(symbol: str, symbols: Mapping[str, int], stmt: Statement) -> int:
    """Look up an operand label, raising UndefinedSymbolError with suggestions."""
    address = symbols.get(symbol)
    if address is None:
        raise UndefinedSymbolError(
            symbol,
            location=stmt.operand_location,
            source_line=stmt.text,
            similar_symbols=difflib.get_close_matches(symbol, list(symbols), n=3),
        )
    return address


def encode_instruction(stmt: Statement, symbols: Mapping[str, int]) -> bytes:
    """
    Encode a machine instruction as three bytes.

    Addresses above $7FFF are added as they are and overlap the indexing
    bit; a warning is logged. The sum is kept to 24 bits.

    Raises:
        UndefinedSymbolError: If the operand label is not defined
    """
    word = get_opcode(stmt.opcode) << 16
    operand = parse_instruction_operand(stmt.operand)

    if operand.indexed:
        word += INDEX_FLAG

    if operand.symbol is not None:
        address = _resolve(operand.symbol, symbols, stmt)
        if address > MAX_OPERAND_ADDRESS:
            logger.warning(
                f"{stmt.operand_location}: address ${address:X} of "
                f"'{operand.symbol}' overlaps the index bit"
            )
        word += address

    return (word & WORD_MASK).to_bytes(WORD_SIZE, "big")


def generate_object_program(
    program: Program,
    pass1: Pass1Result,
    config: Optional[AssemblerConfig] = None,
) -> Pass2Result:
    """
    Run pass 2 and build the object program.

    Raises:
        UndefinedSymbolError: On an unresolved instruction or END operand
        DirectiveError: On an unknown instruction/directive
        AssemblySyntaxError: On a malformed directive operand
    """
    config = config or AssemblerConfig()
    symbols = pass1.symbols
    starting = program.start
    location_counter = starting
    entry = starting

    builder = TextRecordBuilder(config.text_record_capacity)
    listing: list[ListingLine] = []
    if program.header is not None:
        listing.append(ListingLine(starting, b"", program.header.line, program.header.text))

    for stmt in program.statements:
        if stmt.label is not None and symbols.get(stmt.label) != location_counter:
            raise AssemblerError(
                f"phase error: '{stmt.label}' is at ${location_counter:04X} in pass 2 "
                f"but ${symbols.get(stmt.label, 0):04X} in pass 1",
                stmt.location,
                source_line=stmt.text,
            )

        if stmt.is_end:
            builder.flush()
            if stmt.operand is not None:
                entry = _resolve(stmt.operand, symbols, stmt)
            listing.append(ListingLine(location_counter, b"", stmt.source.line, stmt.text))
            break

        opcode = stmt.opcode
        code = b""

        if is_instruction(opcode):
            code = encode_instruction(stmt, symbols)
            size = len(code)
        elif opcode == WORD:
            value = parse_decimal(
                stmt.operand, WORD, stmt.operand_location, stmt.text, allow_negative=True
            )
            code = encode_word(value, stmt.operand_location, stmt.text).to_bytes(WORD_SIZE, "big")
            size = len(code)
        elif opcode == BYTE:
            code = decode_byte_constant(stmt.operand, stmt.operand_location, stmt.text)
            size = len(code)
        elif opcode == RESB:
            size = parse_decimal(stmt.operand, RESB, stmt.operand_location, stmt.text)
        elif opcode == RESW:
            size = WORD_SIZE * parse_decimal(stmt.operand, RESW, stmt.operand_location, stmt.text)
        else:
            raise DirectiveError(
                opcode,
                location=stmt.opcode_location,
                source_line=stmt.text,
                pass_name="pass2",
            )

        builder.emit(location_counter, code)
        if opcode in RESERVATION_DIRECTIVES:
            builder.reserve()
        listing.append(ListingLine(location_counter, code, stmt.source.line, stmt.text))
        location_counter += size

    object_program = ObjectProgram(
        header=HeaderRecord(program.name, starting, pass1.program_length),
        end=EndRecord(entry),
        text_records=builder.finish(),
    )
    program_length = location_counter - starting
    logger.debug(
        f"Pass 2 complete: {len(object_program.text_records)} Text records, "
        f"length ${program_length:06X}"
    )
    return Pass2Result(
        object_program=object_program,
        program_length=program_length,
        listing=tuple(listing),
    )
