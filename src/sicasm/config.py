"""
SIC Assembler - Configuration
=============================

Assembler settings that control object file layout. Configuration can
come from:
- Default values (defined here, matching the classic SIC object format)
- Environment variables (AssemblerConfig.from_env)
- Explicit construction by library callers

Environment variables (all optional):
    SICASM_RECORD_CAPACITY: Maximum bytes per Text record (1-255)
    SICASM_END_NEWLINE: "1"/"true"/"yes" to terminate the End record with a newline
    SICASM_OBJECT_SUFFIX: Suffix for derived object file names (default ".obj")
    SICASM_ENCODING: Source file encoding (default "utf-8")
"""

from dataclasses import dataclass
import os


# Largest payload a Text record can declare with a two-digit hex byte count
MAX_RECORD_CAPACITY = 0xFF


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        text_record_capacity: Maximum object bytes per Text record (default: 30)
        end_record_newline: Terminate the End record with a newline (default: False)
        object_suffix: Suffix used when deriving the object file name
        source_encoding: Encoding used to read source files
    """

    text_record_capacity: int = 30
    end_record_newline: bool = False
    object_suffix: str = ".obj"
    source_encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not 1 <= self.text_record_capacity <= MAX_RECORD_CAPACITY:
            raise ValueError(
                f"text record capacity must be 1-{MAX_RECORD_CAPACITY}, "
                f"got {self.text_record_capacity}"
            )

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create an AssemblerConfig from environment variables.

        Unset or invalid values fall back to the defaults.
        """
        config = cls()

        if capacity := os.environ.get("SICASM_RECORD_CAPACITY"):
            try:
                value = int(capacity)
            except ValueError:
                value = 0
            if 1 <= value <= MAX_RECORD_CAPACITY:
                config.text_record_capacity = value

        if end_newline := os.environ.get("SICASM_END_NEWLINE"):
            config.end_record_newline = end_newline.strip().lower() in ("1", "true", "yes", "on")

        if suffix := os.environ.get("SICASM_OBJECT_SUFFIX"):
            config.object_suffix = suffix if suffix.startswith(".") else f".{suffix}"

        if encoding := os.environ.get("SICASM_ENCODING"):
            config.source_encoding = encoding

        return config
