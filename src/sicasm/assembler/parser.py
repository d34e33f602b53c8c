"""
SIC Assembly Line Parser
========================

This module turns token lines into statements with explicit fields:

    [label]  opcode  [operand]  [trailing comment...]

SIC source has no label marker (no colon, no fixed column), so a label is
detected structurally. All label detection goes through split_label(); both
passes rely on the Statement fields it produces and never look at raw tokens.

Label Detection
---------------
A line carries a label iff it has more than one token AND its first token is
neither a machine mnemonic nor a directive name:

| Tokens                  | label  | opcode | operand |
|-------------------------|--------|--------|---------|
| RSUB                    | -      | RSUB   | -       |
| LDA ALPHA               | -      | LDA    | ALPHA   |
| WORD 5                  | -      | WORD   | 5       |
| FIRST LDA ALPHA         | FIRST  | LDA    | ALPHA   |
| LOOP RSUB               | LOOP   | RSUB   | -       |
| LDA BUFFER,X trailing   | -      | LDA    | BUFFER,X|

A label spelled like a mnemonic (e.g. "J") cannot be told apart from the
instruction and is read as the instruction.

Program Layout
--------------
The first line is the header when it is "START addr" or "name START addr".
A program without a START line is unnamed, loads at 0, and its first line
is assembled like any other statement (it is not skipped).
Statements follow up to and including the first END statement; lines after
END are ignored.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from sicasm.assembler.lexer import TokenLine, tokenize
from sicasm.assembler.opcodes import END, START, is_directive, is_instruction
from sicasm.assembler.operands import parse_hex_address
from sicasm.errors import AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass(frozen=True)
class Statement:
    """
    One source statement.

    Attributes:
        label: Label defined by this line, or None
        opcode: Mnemonic or directive name
        operand: Operand field, or None
        source: The token line the statement was parsed from
    """
    label: Optional[str]
    opcode: str
    operand: Optional[str]
    source: TokenLine

    @property
    def location(self) -> SourceLocation:
        return self.source.location

    @property
    def opcode_location(self) -> SourceLocation:
        return self.source.location_of(1 if self.label is not None else 0)

    @property
    def operand_location(self) -> SourceLocation:
        return self.source.location_of(2 if self.label is not None else 1)

    @property
    def text(self) -> str:
        return self.source.text

    @property
    def is_end(self) -> bool:
        return self.opcode == END


@dataclass(frozen=True)
class Program:
    """
    A parsed program.

    Attributes:
        name: Program name from "name START addr" ("" when unnamed)
        start: Load address from the START operand (0 when absent)
        header: The START line, or None when the program has none
        statements: Body statements, ending with the END statement
        token_lines: Every token line of the source, in order
    """
    name: str
    start: int
    header: Optional[TokenLine]
    statements: tuple[Statement, ...]
    token_lines: tuple[TokenLine, ...]

    @property
    def end(self) -> Statement:
        return self.statements[-1]


# =============================================================================
# Label Detection
# =============================================================================

def has_label(tokens: tuple[str, ...] | list[str]) -> bool:
    """
    Return True if the first token of a line is a label.

    A line has a label iff it is not a single token and its first token
    is neither a machine mnemonic nor a directive.
    """
    if len(tokens) <= 1:
        return False
    first = tokens[0]
    return not (is_instruction(first) or is_directive(first))


def split_label(line: TokenLine) -> Statement:
    """Split a token line into label, opcode and operand fields."""
    tokens = line.tokens
    if has_label(tokens):
        label, rest = tokens[0], tokens[1:]
    else:
        label, rest = None, tokens

    opcode = rest[0]
    operand = rest[1] if len(rest) > 1 else None
    return Statement(label=label, opcode=opcode, operand=operand, source=line)


# =============================================================================
# Program Parsing
# =============================================================================

def parse_header(line: TokenLine) -> Optional[tuple[str, int]]:
    """
    Parse a START line.

    Returns:
        (name, start address) if the line is a START line, otherwise None
    """
    if line[0] == START:
        name, operand_index = "", 1
    elif len(line) > 1 and line[1] == START:
        name, operand_index = line[0], 2
    else:
        return None

    operand = line[operand_index] if len(line) > operand_index else None
    start = parse_hex_address(
        operand,
        line.location_of(operand_index if operand else 0),
        source_line=line.text,
    )
    return name, start


def parse_program(token_lines: list[TokenLine], filename: str = "<input>") -> Program:
    """
    Parse token lines into a Program.

    Raises:
        AssemblySyntaxError: If the program is empty, the START operand is
            invalid, or there is no END statement
    """
    if not token_lines:
        raise AssemblySyntaxError(
            "empty program",
            SourceLocation(filename, 1, 1),
            hint="a program needs at least an END line",
        )

    header = token_lines[0]
    parsed_header = parse_header(header)
    if parsed_header is None:
        name, start, header = "", 0, None
        body = token_lines
    else:
        name, start = parsed_header
        body = token_lines[1:]

    statements: list[Statement] = []
    for line in body:
        stmt = split_label(line)
        statements.append(stmt)
        if stmt.is_end:
            break
    else:
        last = token_lines[-1]
        raise AssemblySyntaxError(
            "missing END directive",
            SourceLocation(filename, last.line + 1, 1),
            hint="terminate the program with END [first-instruction]",
        )

    ignored = len(body) - len(statements)
    if ignored:
        logger.debug(f"Ignoring {ignored} lines after END")

    return Program(
        name=name,
        start=start,
        header=header,
        statements=tuple(statements),
        token_lines=tuple(token_lines),
    )


def parse_source(source: str, filename: str = "<input>") -> Program:
    """Tokenize and parse source text."""
    return parse_program(tokenize(source, filename), filename)
