# Code to write request bodies out to bytes.
#
# Strategy: each writer is a generator function which takes the thing to
# write plus a WriteContext, and yields the bytes that make it up, in order,
# in as many pieces as it likes. Nothing here buffers a whole body; the
# encoder decides whether to join the pieces or stream them.
#
# WRITERS and CONTENT_WRITERS map a variant's type to the writer for it. Any
# type that isn't a key is a type we don't know how to put on the wire.

import base64
import logging
from urllib.parse import quote_plus

from ._body import (
    Binary, FormFile, MultipartMixed, NameValue, Plain, StreamSource,
)
from ._content_type import ContentType

__all__ = ["urlencode", "WRITERS", "CONTENT_WRITERS"]

logger = logging.getLogger(__name__)

CRLF = b"\r\n"


class WriteContext:
    def __init__(self, encoding, chunk_size, boundaries,
                 name_value_content_type=None):
        self.encoding = encoding
        self.chunk_size = chunk_size
        self.boundaries = boundaries
        self.name_value_content_type = name_value_content_type

    # Header lines are always utf-8, whatever the body encoding is; only part
    # content is written in self.encoding.
    def line(self, text):
        return text.encode("utf-8") + CRLF


################################################################
# application/x-www-form-urlencoded
################################################################

# Each name and value is encoded to bytes with the given encoding (the
# equivalent of a <form accept-charset=...>), then every byte other than
# ALPHA / DIGIT / "-" / "_" / "." / "~" is written as %XX, except that
# space becomes "+".
def urlencode(pairs, encoding="utf-8"):
    return "&".join(
        "{}={}".format(quote_plus(name, safe="", encoding=encoding),
                       quote_plus(value, safe="", encoding=encoding))
        for name, value in pairs)


def write_urlencoded(parts, ctx):
    encoded = urlencode(((part.name, part.value) for part in parts),
                        ctx.encoding)
    # after percent-encoding, everything is ascii
    yield encoded.encode("ascii")


################################################################
# multipart/form-data and multipart/mixed
################################################################

# Quoted disposition parameters: a bare " would end the quoted-string early
# (we follow the rack convention of backslash-escaping it), and a CR or LF
# would let a field name start a new header, so those get percent-encoded
# like browsers do.
def _escape(value):
    return (value.replace('"', '\\"')
            .replace("\r", "%0D")
            .replace("\n", "%0A"))


def _disposition(kind, params):
    pieces = ["Content-Disposition: {}".format(kind)]
    for name, value in params:
        pieces.append('{}="{}"'.format(name, _escape(value)))
    return "; ".join(pieces)


def write_plain(content, ctx):
    yield content.text.encode(ctx.encoding)


def write_binary(content, ctx):
    yield base64.b64encode(content.data)


def write_stream(content, ctx):
    copied = 0
    for chunk in content.read_chunks(ctx.chunk_size):
        copied += len(chunk)
        yield chunk
    logger.debug("copied %d bytes from %r", copied, content.stream)


CONTENT_WRITERS = {
    Plain: write_plain,
    Binary: write_binary,
    StreamSource: write_stream,
}


def write_file(disposition, file, ctx):
    yield ctx.line(disposition)
    if type(file.content) is Binary:
        yield ctx.line("Content-Transfer-Encoding: base64")
    yield ctx.line("Content-Type: {}".format(file.content_type))
    yield CRLF
    yield from CONTENT_WRITERS[type(file.content)](file.content, ctx)


def write_name_value(part, ctx):
    yield ctx.line(_disposition("form-data", [("name", part.name)]))
    if ctx.name_value_content_type is not None:
        yield ctx.line(
            "Content-Type: {}".format(ctx.name_value_content_type))
    yield CRLF
    yield part.value.encode(ctx.encoding)


def write_form_file(part, ctx):
    disposition = _disposition(
        "form-data", [("name", part.name), ("filename", part.file.filename)])
    yield from write_file(disposition, part.file, ctx)


# The nested body's close delimiter is the last thing in the outer part; the
# CRLF that follows it belongs to the outer delimiter (see write_multipart).
def write_multipart_mixed(part, ctx):
    inner = ctx.boundaries.next_boundary()
    content_type = ContentType("multipart", "mixed", boundary=inner)
    yield ctx.line(_disposition("form-data", [("name", part.name)]))
    yield ctx.line("Content-Type: {}".format(content_type))
    yield CRLF
    for file in part.files:
        yield "--{}\r\n".format(inner).encode("ascii")
        disposition = _disposition("file", [("filename", file.filename)])
        yield from write_file(disposition, file, ctx)
        yield CRLF
    yield "--{}--".format(inner).encode("ascii")


WRITERS = {
    NameValue: write_name_value,
    FormFile: write_form_file,
    MultipartMixed: write_multipart_mixed,
}


def write_multipart(parts, boundary, ctx):
    for part in parts:
        yield "--{}\r\n".format(boundary).encode("ascii")
        yield from WRITERS[type(part)](part, ctx)
        yield CRLF
    yield "--{}--\r\n".format(boundary).encode("ascii")
