"""
psycopg adapters for the imported document.

The document travels as the raw buffer read from the input; the wrapper class
picks the dumper, and the dumper decides the wire format and the parameter
type oid. Wrapping never copies the buffer.
"""
from psycopg.adapt import AdaptersMap, Dumper
from psycopg.pq import Format

from pgimportdoc.params import DocumentType

# catalog/pg_type.h
XML_OID = 142
BYTEA_OID = 17


class Document:
    __slots__ = ("data",)

    def __init__(self, data):
        self.data = data

    def __len__(self):
        return len(self.data)

    def __repr__(self):
        return f"{type(self).__name__}({len(self.data)} bytes)"


class XmlDocument(Document):
    pass


class ByteaDocument(Document):
    pass


class TextDocument(Document):
    pass


class XmlBinaryDumper(Dumper):
    format = Format.BINARY
    oid = XML_OID

    def dump(self, obj):
        return obj.data


class ByteaBinaryDumper(Dumper):
    format = Format.BINARY
    oid = BYTEA_OID

    def dump(self, obj):
        return obj.data


class UntypedTextDumper(Dumper):
    """Text format with oid 0: the server infers the type and converts the encoding."""
    format = Format.TEXT
    oid = 0

    def dump(self, obj):
        return obj.data


_DOCUMENT_CLASSES = {
    DocumentType.XML: XmlDocument,
    DocumentType.BYTEA: ByteaDocument,
    DocumentType.TEXT: TextDocument,
}


def register_document_dumpers(adapters: AdaptersMap) -> None:
    """Register the document dumpers on a connection (or global) adapters map."""
    adapters.register_dumper(XmlDocument, XmlBinaryDumper)
    adapters.register_dumper(ByteaDocument, ByteaBinaryDumper)
    adapters.register_dumper(TextDocument, UntypedTextDumper)


def wrap_document(data, doc_type: DocumentType) -> Document:
    """Tag the buffered bytes so the matching dumper binds them."""
    return _DOCUMENT_CLASSES[doc_type](data)
