"""Tests for buffering the imported document."""

import io
import os

import pytest

from pgimportdoc.errors import DocumentTooLarge, InputError
from pgimportdoc.utils.document_reader import canonicalize_path, read_chunks, read_document


class BrokenStream(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError(5, "Input/output error")


def test_reads_file_exactly(tmp_path):
    data = bytes(range(256)) * 20 + b"\x00tail"
    doc = tmp_path / "doc.bin"
    doc.write_bytes(data)

    assert read_document(str(doc)) == data


def test_reads_empty_file(tmp_path):
    doc = tmp_path / "empty.xml"
    doc.write_bytes(b"")

    assert read_document(str(doc)) == b""


def test_reads_stdin_and_leaves_it_open():
    stdin = io.BytesIO(b"hello\nworld")

    assert read_document(None, stdin=stdin) == b"hello\nworld"
    assert not stdin.closed


def test_stdin_and_file_give_same_bytes(tmp_path):
    data = "příliš žluťoučký".encode("latin2")
    doc = tmp_path / "doc.txt"
    doc.write_bytes(data)

    assert read_document(str(doc)) == read_document(None, stdin=io.BytesIO(data))


def test_canonicalize_path():
    assert canonicalize_path("a//b/../c.xml") == os.path.join("a", "c.xml")
    assert canonicalize_path("./doc.xml") == "doc.xml"


def test_path_with_up_level_reference(tmp_path):
    (tmp_path / "sub").mkdir()
    doc = tmp_path / "doc.xml"
    doc.write_bytes(b"<a/>")

    assert read_document(str(tmp_path / "sub" / ".." / "doc.xml")) == b"<a/>"


def test_too_large_file_is_refused(tmp_path):
    doc = tmp_path / "big.xml"
    doc.write_bytes(b"12345")

    with pytest.raises(DocumentTooLarge) as exc_info:
        read_document(str(doc), max_size=4)
    assert "big.xml" in str(exc_info.value)
    assert "too big" in str(exc_info.value)
    assert exc_info.value.size == 5


def test_file_at_limit_is_accepted(tmp_path):
    doc = tmp_path / "edge.xml"
    doc.write_bytes(b"1234")

    assert read_document(str(doc), max_size=4) == b"1234"


def test_size_limit_only_applies_to_regular_files():
    assert read_document(os.devnull, max_size=-1) == b""


def test_missing_file(tmp_path):
    missing = tmp_path / "missing.xml"

    with pytest.raises(InputError) as exc_info:
        read_document(str(missing))
    assert "Unable to open" in str(exc_info.value)
    assert "missing.xml" in str(exc_info.value)


def test_read_error():
    with pytest.raises(InputError) as exc_info:
        read_chunks(BrokenStream(), "doc.xml")
    assert "Cannot read data 'doc.xml'" in str(exc_info.value)
    assert "Input/output error" in str(exc_info.value)


def test_small_chunks():
    assert read_chunks(io.BytesIO(b"abcdefg"), "stdin", chunk_size=2) == b"abcdefg"


class ExhaustedStream(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise MemoryError


def test_out_of_memory():
    with pytest.raises(InputError) as exc_info:
        read_chunks(ExhaustedStream(), "stdin")
    assert str(exc_info.value) == "Out of memory"
    assert isinstance(exc_info.value.__cause__, MemoryError)


def test_buffer_is_handed_on_without_a_copy(tmp_path):
    doc = tmp_path / "doc.xml"
    doc.write_bytes(b"<a/>")

    assert type(read_document(str(doc))) is bytearray
    assert type(read_document(None, stdin=io.BytesIO(b"x"))) is bytearray
