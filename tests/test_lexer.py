# =============================================================================
# test_lexer.py - Tokenizer Unit Tests
# =============================================================================
# Tests for the SIC source tokenizer.
#
# Test coverage includes:
#   - Whitespace splitting and token columns
#   - Comment lines
#   - Malformed (empty / whitespace-only) lines
#   - Reading source files
# =============================================================================

import pytest

from sicasm.assembler.lexer import TokenLine, read_source, tokenize
from sicasm.errors import AssemblySyntaxError, SourceFileError


# =============================================================================
# Basic Tokenization Tests
# =============================================================================

class TestTokenize:
    """Test splitting source lines into token lines."""

    def test_single_line(self):
        """A line is split on whitespace."""
        lines = tokenize("COPY START 1000")
        assert len(lines) == 1
        assert lines[0].tokens == ("COPY", "START", "1000")

    def test_tabs_and_repeated_spaces(self):
        """Any run of whitespace separates tokens."""
        lines = tokenize("FIRST\tLDA   ALPHA")
        assert lines[0].tokens == ("FIRST", "LDA", "ALPHA")

    def test_leading_whitespace(self):
        """Unlabelled statements are usually indented."""
        lines = tokenize("        RSUB")
        assert lines[0].tokens == ("RSUB",)
        assert lines[0].columns == (9,)

    def test_columns_are_one_indexed(self):
        """Each token records the column it starts at."""
        lines = tokenize("ALPHA WORD 5")
        assert lines[0].columns == (1, 7, 12)

    def test_line_numbers(self):
        """Line numbers count every source line, comments included."""
        lines = tokenize("START 0\n. comment\nRSUB\nEND")
        assert [line.line for line in lines] == [1, 3, 4]

    def test_source_order_preserved(self):
        """Token lines come out in source order, START and END included."""
        source = "COPY START 1000\nFIRST LDA ALPHA\nALPHA WORD 5\nEND FIRST"
        lines = tokenize(source)
        assert [line[0] for line in lines] == ["COPY", "FIRST", "ALPHA", "END"]

    def test_crlf_line_endings(self):
        """Windows line endings do not leak into tokens."""
        lines = tokenize("START 0\r\nEND\r\n")
        assert lines[1].tokens == ("END",)

    def test_filename_in_location(self):
        """Token locations carry the source file name."""
        lines = tokenize("LDA ALPHA", "prog.asm")
        assert str(lines[0].location_of(1)) == "prog.asm:1:5"

    def test_location_width(self):
        """Token locations know how many columns the token covers."""
        line = tokenize("FIRST LDA ALPHA")[0]
        assert line.location_of(2).width == 5
        assert line.location_of(2).underline() == " " * 10 + "^~~~~"
        assert line.location_of(3).column == 1

    def test_text_kept(self):
        """The raw line text is kept for error messages and listings."""
        lines = tokenize("  LDA ALPHA  ")
        assert lines[0].text == "  LDA ALPHA  "

    def test_token_line_behaves_like_sequence(self):
        """TokenLine supports len() and indexing."""
        line = tokenize("FIRST LDA ALPHA")[0]
        assert isinstance(line, TokenLine)
        assert len(line) == 3
        assert line[2] == "ALPHA"


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test comment line handling."""

    def test_comment_line_discarded(self):
        """Lines starting with '.' are dropped."""
        lines = tokenize(". this is a comment\nRSUB")
        assert len(lines) == 1
        assert lines[0].tokens == ("RSUB",)

    def test_bare_dot_is_comment(self):
        """A single '.' is an empty comment line."""
        assert tokenize(".") == []

    def test_indented_dot_is_not_comment(self):
        """Only a '.' in the very first column starts a comment."""
        lines = tokenize("  . not a comment")
        assert lines[0].tokens == (".", "not", "a", "comment")


# =============================================================================
# Malformed Line Tests
# =============================================================================

class TestMalformedLines:
    """Test that lines without a first character stop tokenization."""

    def test_empty_line_is_error(self):
        """An empty line between statements is fatal."""
        with pytest.raises(AssemblySyntaxError) as exc_info:
            tokenize("START 0\n\nEND")
        assert exc_info.value.location.line == 2
        assert "malformed line" in str(exc_info.value)

    def test_whitespace_only_line_is_error(self):
        """A line of blanks has no fields."""
        with pytest.raises(AssemblySyntaxError):
            tokenize("START 0\n   \t\nEND")

    def test_trailing_newline_is_not_empty_line(self):
        """The newline terminating the last line does not create a line."""
        lines = tokenize("START 0\nEND\n")
        assert len(lines) == 2

    def test_empty_source(self):
        """Empty source has no token lines."""
        assert tokenize("") == []


# =============================================================================
# Source File Tests
# =============================================================================

class TestReadSource:
    """Test reading source files."""

    def test_read_file(self, tmp_path):
        """Source files are read as text."""
        path = tmp_path / "prog.asm"
        path.write_text("START 0\nEND\n")
        assert read_source(path) == "START 0\nEND\n"

    def test_missing_file(self, tmp_path):
        """A missing file is reported as a SourceFileError."""
        with pytest.raises(SourceFileError):
            read_source(tmp_path / "missing.asm")
