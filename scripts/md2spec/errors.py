"""Errors raised while converting spec files."""

from __future__ import annotations

from pathlib import Path

__all__ = ["ConversionError"]


class ConversionError(Exception):
    """A single document could not be read or its output could not be written."""

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"Error converting {self.path}: {message}")
