"""
SIC Instruction Set Definition
==============================

This module defines the SIC (Simplified Instructional Computer) machine
instructions and the assembler directive names.

Every SIC instruction is three bytes long:

    +--------+---+-----------------+
    | opcode | x |     address     |
    +--------+---+-----------------+
      8 bits  1b       15 bits

The opcode occupies the high byte, the indexing bit (x) is bit 15 and the
target address fills the remaining 15 bits.

Directives (START, END, WORD, BYTE, RESB, RESW) are not looked up in the
opcode table; the passes recognise them by name.

Reference
---------
- Leland L. Beck, System Software: An Introduction to Systems Programming,
  Appendix A (SIC instruction set)
"""

# Sentinel returned for anything that is not a machine instruction
NOT_AN_INSTRUCTION = 0xFF

# Size of every machine instruction and of a WORD constant, in bytes
WORD_SIZE = 3


# =============================================================================
# Opcode Table
# =============================================================================
# Key: mnemonic (case-sensitive)
# Value: 8-bit operation code
# =============================================================================

OPCODE_TABLE: dict[str, int] = {
    # Load and store
    "LDA": 0x00,
    "LDX": 0x04,
    "LDL": 0x08,
    "STA": 0x0C,
    "STX": 0x10,
    "STL": 0x14,
    "LDCH": 0x50,
    "STCH": 0x54,
    "STSW": 0xE8,

    # Arithmetic and logic
    "ADD": 0x18,
    "SUB": 0x1C,
    "MUL": 0x20,
    "DIV": 0x24,
    "AND": 0x40,
    "OR": 0x44,

    # Compare
    "COMP": 0x28,
    "TIX": 0x2C,

    # Jumps
    "JEQ": 0x30,
    "JGT": 0x34,
    "JLT": 0x38,
    "J": 0x3C,

    # Subroutine linkage
    "JSUB": 0x48,
    "RSUB": 0x4C,

    # Device I/O
    "TD": 0xE0,
    "RD": 0xD8,
    "WD": 0xDC,
}

MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)


# =============================================================================
# Directives
# =============================================================================

START = "START"
END = "END"
WORD = "WORD"
BYTE = "BYTE"
RESB = "RESB"
RESW = "RESW"

DIRECTIVES: frozenset[str] = frozenset({START, END, WORD, BYTE, RESB, RESW})

# Directives that reserve storage without emitting object bytes
RESERVATION_DIRECTIVES: frozenset[str] = frozenset({RESB, RESW})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode(mnemonic: str) -> int:
    """
    Return the operation code for a mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-sensitive, e.g. "LDA")

    Returns:
        The 8-bit opcode, or NOT_AN_INSTRUCTION if the mnemonic is unknown
    """
    return OPCODE_TABLE.get(mnemonic, NOT_AN_INSTRUCTION)


def is_instruction(mnemonic: str) -> bool:
    """Return True if mnemonic names a machine instruction."""
    return get_opcode(mnemonic) != NOT_AN_INSTRUCTION


def is_directive(name: str) -> bool:
    """Return True if name is an assembler directive."""
    return name in DIRECTIVES
