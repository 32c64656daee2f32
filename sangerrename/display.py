"""Terminal-safe rendering of filenames and values derived from them."""

import os
import sys
from pathlib import Path


def printable(text: str) -> str:
    """Return ``text`` with undecodable filename bytes replaced by U+FFFD.

    Names listed from a POSIX filesystem keep bytes that are not valid in the
    filesystem encoding as lone surrogates, which cannot be written to a UTF-8
    terminal. The original string must still be used for filesystem access.
    """
    try:
        return os.fsencode(text).decode(sys.getfilesystemencoding(), errors="replace")
    except UnicodeEncodeError:
        return text.encode("utf-8", errors="replace").decode("utf-8")


def display_name(path: Path) -> str:
    return printable(path.name)
