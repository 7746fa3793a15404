"""
Buffer the document to import, from a file or from standard input.
"""
import logging
import os
import stat
import sys
from typing import BinaryIO, Optional

from pgimportdoc.db.config import settings
from pgimportdoc.errors import DocumentTooLarge, InputError

log = logging.getLogger(__name__)


def canonicalize_path(filename: str) -> str:
    """Collapse duplicate separators and up-level references; symlinks are left alone."""
    return os.path.normpath(filename)


def read_chunks(stream: BinaryIO, name: str, chunk_size: int = settings.READ_CHUNK_SIZE) -> bytearray:
    buffer = bytearray()
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            buffer += chunk
    except OSError as exc:
        raise InputError(f"Cannot read data '{name}': {exc.strerror or exc}") from exc
    except MemoryError as exc:
        raise InputError("Out of memory") from exc
    # handed on as is, a 1 GiB document is never held twice
    return buffer


def read_document(filename: Optional[str] = None, stdin: Optional[BinaryIO] = None,
                  max_size: int = settings.MAX_DOCUMENT_SIZE) -> bytearray:
    """
    Read the whole document into memory.

    Args:
        filename: path of the document, None reads standard input
        stdin: binary stream used instead of sys.stdin.buffer (tests)
        max_size: regular files larger than this are refused before any read

    Returns:
        the document bytes, unchanged, in the buffer they were read into
    """
    if filename is None:
        stream = stdin if stdin is not None else sys.stdin.buffer
        # stdin belongs to the process, it is never closed here
        return read_chunks(stream, "stdin")

    path = canonicalize_path(filename)
    try:
        f = open(path, "rb")
    except OSError as exc:
        raise InputError(f"Unable to open '{path}': {exc.strerror or exc}") from exc

    with f:
        try:
            st = os.fstat(f.fileno())
        except OSError as exc:
            raise InputError(f"{exc.strerror or exc}") from exc
        if stat.S_ISREG(st.st_mode) and st.st_size > max_size:
            raise DocumentTooLarge(path, st.st_size)
        log.debug("reading %s", path)
        return read_chunks(f, path)
