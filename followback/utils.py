"""Utility functions for reading input documents."""

import sys
from pathlib import Path
from typing import Union

from .error_handling import InputTooLargeError
from .models import SourceKind

JSON_SUFFIXES = {".json"}
HTML_SUFFIXES = {".html", ".htm"}
STDIN_PATH = "-"


def kind_from_path(file_path: Union[str, Path]) -> SourceKind:
    """Infer the source kind from the file extension only.

    The content is never inspected: ``.json`` is JSON, ``.html``/``.htm`` is
    HTML and everything else (including stdin) is treated as pasted text.
    """
    if str(file_path) == STDIN_PATH:
        return SourceKind.TEXT

    suffix = Path(file_path).suffix.lower()
    if suffix in JSON_SUFFIXES:
        return SourceKind.JSON
    if suffix in HTML_SUFFIXES:
        return SourceKind.HTML
    return SourceKind.TEXT


def load_document(file_path: Union[str, Path], max_bytes: int) -> str:
    """Read a document as text, refusing anything over ``max_bytes``.

    Args:
        file_path: Path to the file, or ``-`` for stdin
        max_bytes: Size limit in bytes

    Returns:
        The document text

    Raises:
        FileNotFoundError: If the file does not exist
        InputTooLargeError: If the document is over the limit
    """
    if str(file_path) == STDIN_PATH:
        data = sys.stdin.buffer.read(max_bytes + 1)
        source = "<stdin>"
    else:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        size = path.stat().st_size
        if size > max_bytes:
            raise InputTooLargeError(
                f"{path.name} is {size:,} bytes, the limit is {max_bytes:,}",
                size_bytes=size,
                limit_bytes=max_bytes,
            )
        with open(path, "rb") as f:
            data = f.read()
        source = path.name

    if len(data) > max_bytes:
        raise InputTooLargeError(
            f"{source} exceeds the limit of {max_bytes:,} bytes",
            size_bytes=len(data),
            limit_bytes=max_bytes,
        )

    # utf-8-sig drops the BOM some exporters prepend
    return data.decode("utf-8-sig", errors="replace")
