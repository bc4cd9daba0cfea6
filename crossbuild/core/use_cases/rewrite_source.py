# crossbuild/core/use_cases/rewrite_source.py
"""
Removes the library import from the user's source file.

The library source is concatenated into the same compilation unit as the
user's code, so the import is always dropped rather than left for the
toolchain to resolve.
"""
import io
import re
from functools import lru_cache
from pathlib import Path
from typing import Pattern

from crossbuild.core.use_cases.build_directory import TEXT_ERRORS


@lru_cache(maxsize=None)
def import_pattern(library_name: str) -> Pattern:
    """
    Matches a line whose only effect is `require 'name'` / `require "name"`,
    with optional parentheses and an optional trailing comment.
    """
    name = re.escape(library_name)
    return re.compile(
        rf"""^[ \t]*require[ \t]*(?:\([ \t]*)?(['"]){name}\1[ \t]*\)?[ \t]*(?:\#.*)?$"""
    )


def is_library_import(line: str, library_name: str) -> bool:
    return bool(import_pattern(library_name).match(line.rstrip("\r\n")))


def strip_library_import_text(text: str, library_name: str) -> str:
    lines = io.StringIO(text, newline="")
    return "".join(line for line in lines if not is_library_import(line, library_name))


def strip_library_import(source_path: Path, library_name: str) -> str:
    """
    Returns the source with every library import line omitted.
    All other lines, line endings and non-UTF-8 bytes included, pass
    through unchanged.
    """
    with open(source_path, "r", encoding="utf-8", errors=TEXT_ERRORS, newline="") as f:
        return strip_library_import_text(f.read(), library_name)
