"""
SIC Object Program Records
==========================

This module defines the records of a SIC object program and their text
encoding. An object program is one Header record, zero or more Text records
and one End record, one record per line.

Record Formats
--------------
All addresses and lengths are uppercase hexadecimal, zero-padded.

**Header** (19 characters):
    Col 1:      H
    Col 2-7:    Program name, padded with spaces
    Col 8-13:   Starting address (6 hex digits)
    Col 14-19:  Program length in bytes (6 hex digits)

**Text** (9 + 2n characters):
    Col 1:      T
    Col 2-7:    Starting address of the record (6 hex digits)
    Col 8-9:    Number of object bytes in the record (2 hex digits)
    Col 10+:    Object code, two hex digits per byte

**End** (7 characters):
    Col 1:      E
    Col 2-7:    Address of the first instruction to execute

Example
-------
    HCOPY  001000000006
    T00100006001003000005
    E001000
"""

from dataclasses import dataclass, field
import re

from sicasm.errors import ObjectFormatError

NAME_WIDTH = 6
ADDRESS_WIDTH = 6
MAX_ADDRESS = 0xFFFFFF

_HEX_PATTERN = re.compile(r"[0-9A-F]*")


def format_address(value: int) -> str:
    """Format an address or length as 6 uppercase hex digits."""
    if not 0 <= value <= MAX_ADDRESS:
        raise ValueError(f"address ${value:X} does not fit in {ADDRESS_WIDTH} hex digits")
    return f"{value:06X}"


def _parse_hex(text: str, what: str, line_number: int) -> int:
    if not text or not _HEX_PATTERN.fullmatch(text):
        raise ObjectFormatError(f"line {line_number}: invalid {what} {text!r}")
    return int(text, 16)


# =============================================================================
# Record Types
# =============================================================================

@dataclass(frozen=True)
class HeaderRecord:
    """
    Header record: program name, load address and length.

    Names longer than six characters are truncated.
    """
    name: str
    start: int
    length: int

    def to_text(self) -> str:
        name = self.name[:NAME_WIDTH].ljust(NAME_WIDTH)
        return f"H{name}{format_address(self.start)}{format_address(self.length)}"

    @classmethod
    def from_text(cls, text: str, line_number: int = 1) -> "HeaderRecord":
        if len(text) != 1 + NAME_WIDTH + 2 * ADDRESS_WIDTH or text[0] != "H":
            raise ObjectFormatError(f"line {line_number}: malformed Header record {text!r}")
        return cls(
            name=text[1:7].rstrip(" "),
            start=_parse_hex(text[7:13], "start address", line_number),
            length=_parse_hex(text[13:19], "program length", line_number),
        )


@dataclass(frozen=True)
class TextRecord:
    """
    Text record: a contiguous run of object code.

    Attributes:
        start: Address of the first byte
        code: Object code bytes
    """
    start: int
    code: bytes

    @property
    def length(self) -> int:
        return len(self.code)

    @property
    def end(self) -> int:
        """Address just past the last byte."""
        return self.start + len(self.code)

    def to_text(self) -> str:
        return f"T{format_address(self.start)}{self.length:02X}{self.code.hex().upper()}"

    @classmethod
    def from_text(cls, text: str, line_number: int = 1) -> "TextRecord":
        if len(text) < 9 or text[0] != "T":
            raise ObjectFormatError(f"line {line_number}: malformed Text record {text!r}")
        start = _parse_hex(text[1:7], "record address", line_number)
        length = _parse_hex(text[7:9], "byte count", line_number)
        payload = text[9:]
        if not _HEX_PATTERN.fullmatch(payload) or len(payload) != 2 * length:
            raise ObjectFormatError(
                f"line {line_number}: Text record declares {length} bytes "
                f"but carries {len(payload) / 2:g}"
            )
        return cls(start=start, code=bytes.fromhex(payload))


@dataclass(frozen=True)
class EndRecord:
    """End record: execution entry address."""
    entry: int

    def to_text(self) -> str:
        return f"E{format_address(self.entry)}"

    @classmethod
    def from_text(cls, text: str, line_number: int = 1) -> "EndRecord":
        if len(text) != 1 + ADDRESS_WIDTH or text[0] != "E":
            raise ObjectFormatError(f"line {line_number}: malformed End record {text!r}")
        return cls(entry=_parse_hex(text[1:], "entry address", line_number))


# =============================================================================
# Object Program
# =============================================================================

@dataclass
class ObjectProgram:
    """
    A complete object program.

    Usage:
        program = ObjectProgram(HeaderRecord("COPY", 0x1000, 6), EndRecord(0x1000))
        program.text_records.append(TextRecord(0x1000, bytes.fromhex("001003000005")))
        program.render()
    """
    header: HeaderRecord
    end: EndRecord
    text_records: list[TextRecord] = field(default_factory=list)

    def records(self) -> list[HeaderRecord | TextRecord | EndRecord]:
        """Return all records in file order."""
        return [self.header, *self.text_records, self.end]

    def render(self, end_newline: bool = False) -> str:
        """
        Render the object program as text.

        Header and Text records end with a newline. The End record only does
        when end_newline is True.
        """
        lines = [record.to_text() for record in self.records()]
        return "\n".join(lines) + ("\n" if end_newline else "")

    def code_bytes(self) -> int:
        """Total object bytes across all Text records."""
        return sum(record.length for record in self.text_records)

    @classmethod
    def parse(cls, text: str) -> "ObjectProgram":
        """
        Parse an object program produced by render().

        Raises:
            ObjectFormatError: If the records are malformed or out of order
        """
        lines = text.splitlines()
        if not lines:
            raise ObjectFormatError("empty object program")

        header = HeaderRecord.from_text(lines[0], 1)
        end = None
        text_records = []
        for line_number, line in enumerate(lines[1:], start=2):
            if end is not None:
                raise ObjectFormatError(f"line {line_number}: record after End record")
            if line.startswith("T"):
                text_records.append(TextRecord.from_text(line, line_number))
            elif line.startswith("E"):
                end = EndRecord.from_text(line, line_number)
            else:
                raise ObjectFormatError(f"line {line_number}: unknown record {line!r}")

        if end is None:
            raise ObjectFormatError("missing End record")
        return cls(header=header, end=end, text_records=text_records)
