# =============================================================================
# test_pass1.py - Symbol Collection Tests
# =============================================================================
# Tests for pass 1: label addresses, statement sizes, program length and
# the errors pass 1 reports.
# =============================================================================

import pytest

from sicasm.assembler.parser import parse_source
from sicasm.assembler.pass1 import SymbolTable, build_symbol_table
from sicasm.errors import (
    AddressRangeError,
    AssemblySyntaxError,
    DirectiveError,
    DuplicateSymbolError,
    SourceLocation,
)


def run_pass1(source: str):
    """Parse source and run pass 1 over it."""
    return build_symbol_table(parse_source(source, "test.asm"))


# =============================================================================
# Symbol Table Tests
# =============================================================================

class TestSymbolTable:
    """Test the SymbolTable container."""

    def test_define_and_lookup(self):
        """Defined labels can be looked up."""
        table = SymbolTable()
        table.define("ALPHA", 0x1003, SourceLocation("t.asm", 3))
        assert "ALPHA" in table
        assert table.get("ALPHA").address == 0x1003
        assert len(table) == 1

    def test_labels_are_case_sensitive(self):
        """'alpha' and 'ALPHA' are different labels."""
        table = SymbolTable()
        table.define("ALPHA", 1, SourceLocation("t.asm", 1))
        table.define("alpha", 2, SourceLocation("t.asm", 2))
        assert len(table) == 2

    def test_duplicate_reports_original(self):
        """Redefining a label names the first definition."""
        table = SymbolTable()
        table.define("LOOP", 0, SourceLocation("t.asm", 2))
        with pytest.raises(DuplicateSymbolError) as exc_info:
            table.define("LOOP", 3, SourceLocation("t.asm", 5))
        assert exc_info.value.symbol == "LOOP"
        assert exc_info.value.original_location.line == 2
        assert "first defined at t.asm:2:1" in str(exc_info.value)

    def test_addresses_are_read_only(self):
        """The address snapshot cannot be modified."""
        table = SymbolTable()
        table.define("A", 0, SourceLocation("t.asm", 1))
        addresses = table.addresses()
        with pytest.raises(TypeError):
            addresses["B"] = 3


# =============================================================================
# Location Counter Tests
# =============================================================================

class TestLocationCounter:
    """Test label addresses and statement sizes."""

    def test_copy_example(self):
        """Labels get the location counter of their statement."""
        result = run_pass1("COPY START 1000\nFIRST LDA ALPHA\nALPHA WORD 5\nEND FIRST")
        assert dict(result.symbols) == {"FIRST": 0x1000, "ALPHA": 0x1003}
        assert result.starting == 0x1000
        assert result.program_length == 6

    @pytest.mark.parametrize("statement,size", [
        ("LDA ZERO", 3),
        ("RSUB", 3),
        ("WORD 7", 3),
        ("WORD -1", 3),
        ("BYTE C'EOF'", 3),
        ("BYTE X'F1'", 1),
        ("BYTE X'0102030405'", 5),
        ("RESB 4096", 4096),
        ("RESW 2", 6),
        ("RESW 0", 0),
    ])
    def test_statement_sizes(self, statement, size):
        """Each statement advances the location counter by its size."""
        result = run_pass1(f"START 0\nZERO {statement}\nNEXT RSUB\nEND")
        assert result.symbols["NEXT"] == size

    def test_resw_is_three_bytes_per_word(self):
        """RESW reserves whole words."""
        result = run_pass1("PROG START 0\nFIRST LDA BUF\nBUF RESW 2\nSTA BUF\nEND FIRST")
        assert result.symbols["BUF"] == 3
        assert result.program_length == 12

    def test_start_address_is_hex(self):
        """START 2A places the first statement at $2A."""
        result = run_pass1("START 2A\nFIRST RSUB\nEND FIRST")
        assert result.symbols["FIRST"] == 0x2A

    def test_no_start_loads_at_zero(self):
        """Without START the location counter begins at 0."""
        result = run_pass1("FIRST RSUB\nSECOND RSUB\nEND FIRST")
        assert dict(result.symbols) == {"FIRST": 0, "SECOND": 3}

    def test_label_on_end_line(self):
        """A label on END gets the final location counter."""
        result = run_pass1("START 100\nRSUB\nLAST END")
        assert result.symbols["LAST"] == 0x103

    def test_empty_program_body(self):
        """A program of only START and END has length 0."""
        result = run_pass1("EMPTY START 1000\nEND")
        assert result.program_length == 0
        assert len(result.symbols) == 0

    def test_definitions_keep_locations(self):
        """Symbol entries remember where they were defined."""
        result = run_pass1("START 0\nA RSUB\nB RSUB\nEND")
        assert result.definitions["B"].location == SourceLocation("test.asm", 3, 1)


# =============================================================================
# Error Tests
# =============================================================================

class TestPass1Errors:
    """Test errors detected in pass 1."""

    def test_duplicate_label(self):
        """A label defined twice is fatal."""
        with pytest.raises(DuplicateSymbolError) as exc_info:
            run_pass1("START 0\nX RSUB\nX RSUB\nEND")
        assert exc_info.value.location.line == 3

    def test_unknown_directive(self):
        """An unknown opcode names pass 1 and the opcode."""
        with pytest.raises(DirectiveError) as exc_info:
            run_pass1("START 0\nFIRST FOO BAR\nEND")
        assert exc_info.value.opcode == "FOO"
        assert "[pass1] invalid instruction/directive 'FOO'" in str(exc_info.value)

    def test_single_unknown_token(self):
        """A lone unknown token is an opcode, not a label."""
        with pytest.raises(DirectiveError):
            run_pass1("START 0\nHALT\nEND")

    def test_negative_reservation(self):
        """RESB cannot reserve a negative amount."""
        with pytest.raises(AssemblySyntaxError, match="must not be negative"):
            run_pass1("START 0\nBUF RESB -4\nEND")

    def test_non_decimal_reservation(self):
        """RESW takes a decimal count."""
        with pytest.raises(AssemblySyntaxError, match="decimal"):
            run_pass1("START 0\nBUF RESW 1F\nEND")

    def test_odd_hex_byte_constant(self):
        """X constants need whole bytes."""
        with pytest.raises(AssemblySyntaxError, match="hex constant"):
            run_pass1("START 0\nB BYTE X'F'\nEND")

    def test_program_beyond_address_space(self):
        """The program must fit below $1000000."""
        with pytest.raises(AddressRangeError):
            run_pass1("START FFFFFF\nBIG RESB 16\nEND")
