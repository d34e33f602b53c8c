"""
SIC Object Program Handling
===========================

Record types for SIC object programs (Header, Text, End) and their text
encoding. The assembler builds an ObjectProgram in memory and renders it
once assembly has succeeded; ObjectProgram.parse() reads one back.
"""

from sicasm.objfile.records import (
    EndRecord,
    HeaderRecord,
    ObjectProgram,
    TextRecord,
    format_address,
)

__all__ = [
    "HeaderRecord",
    "TextRecord",
    "EndRecord",
    "ObjectProgram",
    "format_address",
]
