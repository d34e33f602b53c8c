"""
SIC Assembler Command-Line Interface
====================================

- **sicasm**: two-pass SIC assembler

The tool is a Click-based CLI application with help text and consistent
exit codes (see cli.errors).
"""

__all__ = ["sicasm"]
