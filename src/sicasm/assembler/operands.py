"""
SIC Operand Decoding
====================

SIC operands are never expressions. This module decodes the handful of
literal forms the directives accept:

| Directive | Operand form | Example   | Meaning                     |
|-----------|--------------|-----------|-----------------------------|
| START     | hexadecimal  | 1000      | load address $1000          |
| WORD      | decimal      | -5        | one 24-bit word             |
| RESB      | decimal      | 4096      | reserve 4096 bytes          |
| RESW      | decimal      | 2         | reserve 2 words (6 bytes)   |
| BYTE      | X'hex'       | X'F1'     | bytes copied from hex digits|
| BYTE      | C'text'      | C'EOF'    | one byte per character      |

Instruction operands are a label, optionally followed by ",X" to request
indexed addressing.
"""

from dataclasses import dataclass
from typing import Optional
import re

from sicasm.errors import AssemblySyntaxError, SourceLocation

INDEX_SUFFIX = ",X"

# Value added to an instruction word when indexed addressing is requested
INDEX_FLAG = 0x8000

WORD_MIN = -(1 << 23)
WORD_MAX = (1 << 24) - 1
WORD_MASK = 0xFFFFFF

_HEX_PATTERN = re.compile(r"[0-9A-Fa-f]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class InstructionOperand:
    """
    A machine instruction operand.

    Attributes:
        symbol: Referenced label, or None when the instruction has no operand
        indexed: True if the operand ended in ",X"
    """
    symbol: Optional[str]
    indexed: bool = False


def parse_instruction_operand(operand: Optional[str]) -> InstructionOperand:
    """Split an instruction operand into its label and indexing flag."""
    if not operand:
        return InstructionOperand(None)
    if operand.endswith(INDEX_SUFFIX):
        return InstructionOperand(operand[:-len(INDEX_SUFFIX)], indexed=True)
    return InstructionOperand(operand)


def parse_hex_address(
    text: Optional[str],
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> int:
    """Parse the hexadecimal START operand."""
    if text is None or not _HEX_PATTERN.fullmatch(text):
        raise AssemblySyntaxError(
            f"invalid START address {text!r}" if text else "START requires an address",
            location,
            hint="the START operand is a hexadecimal address, e.g. START 1000",
            source_line=source_line,
        )
    return int(text, 16)


def parse_decimal(
    text: Optional[str],
    directive: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
    allow_negative: bool = False,
) -> int:
    """
    Parse a decimal directive operand.

    Raises:
        AssemblySyntaxError: If the operand is missing, not decimal, or
            negative where that is not allowed
    """
    if text is None or not _DECIMAL_PATTERN.fullmatch(text):
        raise AssemblySyntaxError(
            f"{directive} requires a decimal operand, got {text!r}" if text
            else f"{directive} requires a decimal operand",
            location,
            source_line=source_line,
        )
    value = int(text)
    if value < 0 and not allow_negative:
        raise AssemblySyntaxError(
            f"{directive} operand must not be negative ({value})",
            location,
            source_line=source_line,
        )
    return value


def encode_word(
    value: int,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> int:
    """
    Return value as an unsigned 24-bit word.

    Negative values are stored in two's complement.
    """
    if not WORD_MIN <= value <= WORD_MAX:
        raise AssemblySyntaxError(
            f"WORD value {value} does not fit in 24 bits",
            location,
            source_line=source_line,
        )
    return value & WORD_MASK


def decode_byte_constant(
    text: Optional[str],
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> bytes:
    """
    Decode a BYTE operand into the bytes it stores.

    X'..' holds an even number of hex digits, two per byte.
    C'..' holds characters, one byte per character (code point <= $FF).

    Raises:
        AssemblySyntaxError: If the constant is malformed or empty
    """
    if (
        text is None
        or len(text) < 3
        or text[0] not in "XC"
        or text[1] != "'"
        or text[-1] != "'"
    ):
        raise AssemblySyntaxError(
            f"invalid BYTE constant {text!r}" if text else "BYTE requires a constant",
            location,
            hint="write BYTE constants as X'F1' or C'EOF'",
            source_line=source_line,
        )

    kind, body = text[0], text[2:-1]
    if not body:
        raise AssemblySyntaxError(
            f"empty BYTE constant {text!r}", location, source_line=source_line
        )

    if kind == "X":
        if not _HEX_PATTERN.fullmatch(body) or len(body) % 2:
            raise AssemblySyntaxError(
                f"invalid hex constant {text!r}",
                location,
                hint="X'..' needs an even number of hex digits",
                source_line=source_line,
            )
        return bytes.fromhex(body)

    try:
        return body.encode("latin-1")
    except UnicodeEncodeError:
        raise AssemblySyntaxError(
            f"character constant {text!r} has characters outside 8 bits",
            location,
            source_line=source_line,
        ) from None

