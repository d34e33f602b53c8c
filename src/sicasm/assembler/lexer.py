"""
SIC Assembly Source Tokenizer
=============================

This module converts SIC assembly source text into token lines. SIC source
is line oriented: every non-comment line is one statement whose fields are
separated by whitespace.

    COPY    START   1000
    FIRST   LDA     ALPHA
    .       this whole line is a comment
            STA     BETA,X
    ALPHA   WORD    5
            END     FIRST

Rules
-----
- A line whose first character is '.' is a comment and is discarded.
- Any other line is split on whitespace; each piece is one token.
- A line with no tokens (empty or whitespace only) is malformed. There is
  no error recovery, so the first malformed line stops assembly.

Example
-------
>>> from sicasm.assembler.lexer import tokenize
>>> for line in tokenize("COPY START 1000\\n. comment\\nEND", "copy.asm"):
...     print(line)
TokenLine(1, ['COPY', 'START', '1000'])
TokenLine(3, ['END'])
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator
import logging
import re

from sicasm.errors import AssemblySyntaxError, SourceFileError, SourceLocation

logger = logging.getLogger(__name__)

COMMENT_CHAR = "."

_TOKEN_PATTERN = re.compile(r"\S+")


# =============================================================================
# Token Line Data Class
# =============================================================================

@dataclass(frozen=True)
class TokenLine:
    """
    The tokens of one non-comment source line.

    Attributes:
        tokens: Whitespace-delimited fields, in source order
        columns: 1-indexed starting column of each token
        line: Line number in source (1-indexed)
        filename: Name of the source file
        text: The source line without its line terminator
    """
    tokens: tuple[str, ...]
    columns: tuple[int, ...]
    line: int
    filename: str
    text: str

    def __repr__(self) -> str:
        return f"TokenLine({self.line}, {list(self.tokens)!r})"

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> str:
        return self.tokens[index]

    @property
    def location(self) -> SourceLocation:
        """Location of the first token."""
        return self.location_of(0)

    def location_of(self, index: int) -> SourceLocation:
        """Location and width of the token at index (column 1 past the last token)."""
        if 0 <= index < len(self.columns):
            return SourceLocation(
                self.filename, self.line, self.columns[index], len(self.tokens[index])
            )
        return SourceLocation(self.filename, self.line, 1)


# =============================================================================
# Tokenizer
# =============================================================================

def iter_token_lines(source: str, filename: str = "<input>") -> Iterator[TokenLine]:
    """
    Yield a TokenLine for every non-comment line of source.

    Args:
        source: Assembly source text
        filename: Name used in locations and error messages

    Raises:
        AssemblySyntaxError: On an empty or whitespace-only line
    """
    for line_number, text in enumerate(source.splitlines(), start=1):
        if not text:
            raise AssemblySyntaxError(
                "malformed line: empty line",
                SourceLocation(filename, line_number, 1),
                hint="remove blank lines or start them with '.'",
                source_line=text,
            )

        if text[0] == COMMENT_CHAR:
            continue

        matches = list(_TOKEN_PATTERN.finditer(text))
        if not matches:
            raise AssemblySyntaxError(
                "malformed line: no fields",
                SourceLocation(filename, line_number, 1),
                hint="remove blank lines or start them with '.'",
                source_line=text,
            )

        yield TokenLine(
            tokens=tuple(m.group() for m in matches),
            columns=tuple(m.start() + 1 for m in matches),
            line=line_number,
            filename=filename,
            text=text,
        )


def tokenize(source: str, filename: str = "<input>") -> list[TokenLine]:
    """
    Tokenize a whole program.

    Returns:
        Token lines in source order, including the START and END lines
    """
    lines = list(iter_token_lines(source, filename))
    logger.debug(f"Tokenized {filename}: {len(lines)} lines")
    return lines


def read_source(filepath: str | Path, encoding: str = "utf-8") -> str:
    """
    Read an assembly source file.

    Raises:
        SourceFileError: If the file cannot be opened or decoded
    """
    filepath = Path(filepath)
    try:
        return filepath.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceFileError(f"cannot read source file '{filepath}': {e}") from e
